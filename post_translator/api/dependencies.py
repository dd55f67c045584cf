"""
API Dependencies

Shared provider client and poll scheduler for the route handlers. Tests
replace them through app.dependency_overrides.
"""
from typing import Optional

from post_translator.services.provider_client import ProviderClient
from post_translator.workflows.poll_scheduler import PollScheduler


_provider_client: Optional[ProviderClient] = None
_poll_scheduler: Optional[PollScheduler] = None


def get_provider_client() -> ProviderClient:
    """获取 Provider 客户端（进程内单例）"""
    global _provider_client
    if _provider_client is None:
        _provider_client = ProviderClient()
    return _provider_client


def get_poll_scheduler() -> PollScheduler:
    """获取轮询调度器（进程内单例，与 API 共用同一个 Provider 客户端）"""
    global _poll_scheduler
    if _poll_scheduler is None:
        _poll_scheduler = PollScheduler(client=get_provider_client())
    return _poll_scheduler
