"""
Инициализация маршрутов приложения
Объединение всех модулей маршрутов в одном месте
"""

# Определение всех blueprints
__all__ = ['auth_bp', 'main_bp', 'api_bp', 'account_bp']
