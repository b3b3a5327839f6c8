# rubik_engine/render/__init__.py
