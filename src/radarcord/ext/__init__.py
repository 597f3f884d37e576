"""Framework bindings.

Each binding lives in its own module and imports its framework eagerly,
so import only the one you use::

    from radarcord.ext.discordpy import RadarcordDiscordPyClient
    from radarcord.ext.hikari import RadarcordHikariClient
"""
