# rubik_engine/logic/__init__.py
