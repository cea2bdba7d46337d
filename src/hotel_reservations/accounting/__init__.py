"""
Модуль контекста учета (Accounting Context).

Отвечает за регистрацию платежей по бронированиям и подтверждение
оплаченных бронирований.
"""
