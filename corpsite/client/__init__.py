"""Async content client for the CMS API."""

from corpsite.client.api import CmsApi, SectionContent, connect
from corpsite.client.config import ClientConfig
from corpsite.client.content import ContentHandle, ContentState
from corpsite.client.events import ContentBus, ContentUpdate, Subscription
from corpsite.client.exceptions import (
    CmsError,
    CmsFetchError,
    CmsSaveError,
    CmsTransportError,
)
from corpsite.client.sections import SectionSchema, get_schema, register
from corpsite.client.storage import JsonFileStore, LocalStore, MemoryStore
from corpsite.client.transport import AiohttpTransport, Transport

__all__ = [
    "AiohttpTransport",
    "ClientConfig",
    "CmsApi",
    "CmsError",
    "CmsFetchError",
    "CmsSaveError",
    "CmsTransportError",
    "ContentBus",
    "ContentHandle",
    "ContentState",
    "ContentUpdate",
    "JsonFileStore",
    "LocalStore",
    "MemoryStore",
    "SectionContent",
    "SectionSchema",
    "Subscription",
    "Transport",
    "connect",
    "get_schema",
    "register",
]
