"""
Система бронирования номеров отеля.

Ограниченные контексты: каталог (catalog), бронирование (booking) и
учет (accounting), связанные общим ядром (shared_kernel). Сборка
приложения выполняется в bootstrap.bootstrap_app().
"""

__version__ = "0.1.0"
