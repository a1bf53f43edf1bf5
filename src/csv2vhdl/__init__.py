"""
csv2vhdl - Logic analyzer / oscilloscope CSV to VHDL testbench converter.
"""

__version__ = "0.1.0"
