"""Service modules"""
from .compare import CompareService

__all__ = ["CompareService"]
