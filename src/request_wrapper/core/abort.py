"""
Кооперативная отмена запросов.

AbortController выставляет AbortSignal; транспорт и задержка retry ждут
сигнал параллельно со своей работой и прерываются, когда он выставлен.
AbortRegistry хранит контроллеры in-flight запросов по URL и принадлежит
одному экземпляру Request.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)


class AbortSignal:
    """Флаг отмены, который можно ждать из корутины."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    async def wait(self) -> None:
        """Дождаться отмены."""
        await self._event.wait()

    def _abort(self, reason: Optional[str]) -> None:
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()


class AbortController:
    """
    Управляет AbortSignal одного in-flight запроса.

    Example:
        >>> controller = AbortController()
        >>> controller.abort("user left the page")
        >>> controller.signal.aborted
        True
    """

    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self, reason: Optional[str] = None) -> None:
        """Выставить сигнал отмены. Повторный вызов ничего не делает."""
        self.signal._abort(reason)


class AbortRegistry:
    """
    Реестр URL -> контроллеры in-flight запросов.

    Под одним URL может быть несколько контроллеров (параллельные вызовы
    одного URL). Завершившийся вызов удаляет только свой контроллер;
    отмена URL прерывает все его вызовы.

    Example:
        >>> registry = AbortRegistry()
        >>> controller = registry.register("/users")
        >>> registry.abort("/users")
        1
        >>> controller.signal.aborted
        True
    """

    def __init__(self) -> None:
        self._controllers: Dict[str, List[AbortController]] = {}

    def register(self, url: str) -> AbortController:
        """Создать и зарегистрировать контроллер для URL."""
        controller = AbortController()
        self._controllers.setdefault(url, []).append(controller)
        return controller

    def release(self, url: str, controller: AbortController) -> None:
        """Удалить контроллер завершившегося вызова."""
        controllers = self._controllers.get(url)
        if not controllers:
            return
        try:
            controllers.remove(controller)
        except ValueError:
            # Уже удалён через abort()
            return
        if not controllers:
            del self._controllers[url]

    def abort(self, urls: Union[str, Iterable[str]], reason: Optional[str] = None) -> int:
        """
        Отменить и удалить контроллеры указанных URL.

        Args:
            urls: Один URL или список URL
            reason: Причина отмены

        Returns:
            Количество отменённых контроллеров
        """
        if isinstance(urls, str):
            urls = [urls]

        aborted = 0
        for url in urls:
            for controller in self._controllers.pop(url, []):
                controller.abort(reason)
                aborted += 1
        if aborted:
            logger.debug(f"Aborted {aborted} request(s)")
        return aborted

    def abort_all(self, reason: Optional[str] = None) -> int:
        """Отменить все контроллеры и очистить реестр."""
        return self.abort(list(self._controllers), reason)

    def get(self, url: str) -> List[AbortController]:
        """Контроллеры URL (копия списка)."""
        return list(self._controllers.get(url, []))

    def urls(self) -> List[str]:
        return list(self._controllers)

    def __contains__(self, url: object) -> bool:
        return url in self._controllers

    def __len__(self) -> int:
        return sum(len(controllers) for controllers in self._controllers.values())
