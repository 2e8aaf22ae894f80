import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Awaitable, Callable, Tuple, TypeVar

T = TypeVar("T")


def parse_version(version_str: str) -> Tuple[int, ...]:
    """
    Parse a version string into a tuple of integers for comparison.

    Args:
        version_str: Version string (e.g., "1.2.3")

    Returns:
        Tuple of integers representing the version components

    Example:
        >>> parse_version("1.2.3")
        (1, 2, 3)
    """
    components = []
    for part in version_str.strip().lstrip("vV").split('.'):
        # Leading digits only, "3rc1" -> 3
        digits = ''
        for char in part:
            if char.isdigit():
                digits += char
            else:
                break

        components.append(int(digits) if digits else 0)

    # "1.2" and "1.2.0" are the same version
    while len(components) > 1 and components[-1] == 0:
        components.pop()

    return tuple(components)


def compare_versions(current: str, latest: str) -> int:
    """
    Compare two version strings.

    Args:
        current: Current version string
        latest: Latest version string

    Returns:
        -1 if current < latest, 0 if equal, 1 if current > latest
    """
    current_tuple = parse_version(current)
    latest_tuple = parse_version(latest)

    if current_tuple < latest_tuple:
        return -1
    elif current_tuple > latest_tuple:
        return 1
    else:
        return 0


def run_sync(coro_factory: Callable[[], Awaitable[T]]) -> T:
    """
    Run a coroutine to completion from synchronous code.

    When the calling thread already runs an event loop, the coroutine runs on
    a fresh loop in a worker thread and the caller blocks until it's done.

    Args:
        coro_factory: Creates the coroutine to run

    Returns:
        The coroutine's result
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro_factory())

    with ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(lambda: asyncio.run(coro_factory())).result()
