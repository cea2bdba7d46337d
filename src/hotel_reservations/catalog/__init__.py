"""
Модуль контекста каталога (Catalog Context).

Отвечает за справочные данные отеля:
- Типы номеров и номера
- Дополнительные услуги
- Роли и пользователи
"""
