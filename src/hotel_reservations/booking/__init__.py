"""
Модуль контекста бронирования (Booking Context).

Отвечает за управление бронированием номеров в отеле, включая:
- Поиск свободных номеров и расчет стоимости
- Создание, отмену, перенос и смену статуса бронирований
- Позиции дополнительных услуг
"""
