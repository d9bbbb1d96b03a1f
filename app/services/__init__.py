# app/services/__init__.py
"""
Бизнес-логика приложения: аккаунты, вопросы, каталог игры, результаты
"""
