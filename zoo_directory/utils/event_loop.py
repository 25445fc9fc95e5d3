"""Event loop access for synchronous serverless handlers."""

import asyncio


def get_event_loop() -> asyncio.AbstractEventLoop:
    """Return the thread's usable event loop, creating one if none is set or it was closed."""
    try:
        loop = asyncio.get_event_loop()
        if loop.is_closed():
            raise RuntimeError("event loop is closed")
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop
