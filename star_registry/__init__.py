"""
Star Registry: приватная цепочка блоков для регистрации звезд за адресами кошельков
"""
__version__ = "1.0.0"
