from .cache_interfaces import IPagedListCache, ISessionCache, ListAndCount

__all__ = ["IPagedListCache", "ISessionCache", "ListAndCount"]
