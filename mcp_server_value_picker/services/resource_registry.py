"""Resource registry for UI views and other fetchable content."""

from collections.abc import Awaitable, Callable

from ..errors import DuplicateResourceError, UnknownResourceError
from ..logger import get_logger, log_performance
from ..models import ResolvedResource, UiResourceDescriptor

logger = get_logger(__name__)

ResourceFetcher = Callable[[], Awaitable[str]]


class ResourceRegistry:
    """Maps resource URIs to a MIME profile and a fetcher.

    Content is never cached: every resolution calls the fetcher again, so
    the content may change between requests.
    """

    def __init__(self) -> None:
        self._resources: dict[str, tuple[UiResourceDescriptor, ResourceFetcher]] = {}

    def __contains__(self, uri: str) -> bool:
        return uri in self._resources

    def register(
        self,
        uri: str,
        mime_profile: str,
        fetcher: ResourceFetcher,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> UiResourceDescriptor:
        if uri in self._resources:
            raise DuplicateResourceError(uri)

        descriptor = UiResourceDescriptor(
            uri=uri,
            name=name or uri,
            mime_type=mime_profile,
            description=description,
        )
        self._resources[uri] = (descriptor, fetcher)
        logger.debug(f"Registered resource {uri} ({mime_profile})")
        return descriptor

    def get(self, uri: str) -> UiResourceDescriptor:
        try:
            return self._resources[uri][0]
        except KeyError:
            raise UnknownResourceError(uri) from None

    def list_descriptors(self) -> list[UiResourceDescriptor]:
        return [descriptor for descriptor, _ in self._resources.values()]

    @log_performance
    async def resolve(self, uri: str) -> ResolvedResource:
        """Return the MIME profile and freshly fetched content of a resource."""
        entry = self._resources.get(uri)
        if entry is None:
            raise UnknownResourceError(uri)

        descriptor, fetcher = entry
        text = await fetcher()
        return ResolvedResource(uri=uri, mime_type=descriptor.mime_type, text=text)
