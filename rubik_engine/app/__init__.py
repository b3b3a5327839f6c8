# rubik_engine/app/__init__.py
