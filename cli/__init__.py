"""CLI package for the book lending tracker"""
from .main import cli

__all__ = ['cli']
