from .types import URI, InvalidUriColumnValue

__all__ = ['URI', 'InvalidUriColumnValue']
