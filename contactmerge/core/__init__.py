"""Core record model."""

from .record import Record, NameComponents

__all__ = ['Record', 'NameComponents']
