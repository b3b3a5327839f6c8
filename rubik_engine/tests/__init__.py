# rubik_engine/tests/__init__.py
