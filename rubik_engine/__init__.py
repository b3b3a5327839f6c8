# rubik_engine/__init__.py
"""Motor del cubo Rubik 3x3x3 basado en cubelets."""
