"""Type aliases using PEP 695 syntax.

This module defines the callable and content shapes shared by the stats
client, the callback factory and the framework bindings.
"""

from collections.abc import Awaitable, Callable, Mapping

from radarcord.types.embeds import RadarcordEmbed
from radarcord.types.models import StatsPostResult

# Snowflakes arrive as int from discord libraries and as str from users
type Snowflake = str | int

# Framework-neutral message content
# Bindings may additionally accept their own native embed/payload objects
type MessageContent = str | RadarcordEmbed | Mapping[str, object]

# Callback invoked with every stats post result (sync or async)
type StatsPostCallback = Callable[[StatsPostResult], Awaitable[None] | None]

# Builders turning a post result into an embed or message content
type EmbedBuilder = Callable[[StatsPostResult], object]
type ContentBuilder = Callable[[StatsPostResult], object]

# Hook receiving notification send failures
type SendErrorHook = Callable[[BaseException, StatsPostResult], Awaitable[None] | None]

# Hook receiving failures raised by a scheduled tick
type TickErrorHook = Callable[[BaseException], Awaitable[None] | None]
