"""
Xorscope
Repeating-key XOR cryptanalysis: keysize estimation, transposition,
frequency analysis and ECB detection
"""

__version__ = "1.0.0"
