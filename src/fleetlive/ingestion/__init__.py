"""Ingestion layer.

Adapters that turn snapshot entries and push-channel bodies into canonical
models. Only the state/store layer is allowed to merge them.
"""

__all__: list[str] = []
