from httpx import Client

from georesolve.config import HTTP_TIMEOUT, USER_AGENT

HTTP = Client(
    headers={'User-Agent': USER_AGENT},
    timeout=HTTP_TIMEOUT.total_seconds(),
    follow_redirects=True,
)


def chunked(items: list, size: int) -> list[list]:
    """
    Split a list into consecutive chunks of at most the given size.

    >>> chunked([1, 2, 3, 4, 5], 2)
    [[1, 2], [3, 4], [5]]
    """
    if size <= 0:
        raise ValueError(f'Chunk size must be positive, got {size!r}')
    return [items[i : i + size] for i in range(0, len(items), size)]
