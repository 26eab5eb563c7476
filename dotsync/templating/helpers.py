# Dotsync Template Helpers
# Built-in values and functions available in every template

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from dotsync.utils.platform import (
    get_current_platform,
    get_hostname,
    get_os_release,
    get_uid,
    get_username,
)


@dataclass(frozen=True)
class MachineFacts:
    """Facts about the machine a template is rendered on."""

    hostname: str
    user: str
    uid: int
    platform: str
    os_release: dict[str, str] = field(default_factory=dict, compare=False)

    @classmethod
    def detect(cls, hostname: str | None = None) -> "MachineFacts":
        return cls(
            hostname=hostname if hostname is not None else get_hostname(),
            user=get_username(),
            uid=get_uid(),
            platform=get_current_platform(),
            os_release=get_os_release(),
        )


def builtin_helpers(facts: MachineFacts) -> dict[str, Any]:
    """
    Build the template globals for a machine.

    Values: ``hostname``, ``user``, ``uid``, ``platform``, ``os_release``.

    Functions:
        ``get_mine()``: the current hostname.
        ``get_mine(map, default)``: ``map[hostname]``, or default when absent.
        ``if_host(*names)``, ``if_user(*names)``, ``if_uid(*uids)``: membership tests.
        ``if_os(key, *values)``: tests ``os_release[key]`` against values.
        ``unless_host``, ``unless_user``, ``unless_uid``, ``unless_os``: negations.

    Example::

        {% if if_host("laptop", "desktop") %}font_size = 14{% endif %}
    """

    def get_mine(mapping: Mapping | None = None, *default: Any) -> Any:
        if mapping is None:
            return facts.hostname
        if len(default) != 1:
            raise TypeError(
                "get_mine expects 0 or 2 arguments: get_mine() renders the hostname, "
                "get_mine(map, default) renders map[hostname] or default"
            )
        return mapping.get(facts.hostname, default[0])

    def if_host(*names: str) -> bool:
        return facts.hostname in names

    def if_user(*names: str) -> bool:
        return facts.user in names

    def if_uid(*uids: int | str) -> bool:
        return any(int(uid) == facts.uid for uid in uids)

    def if_os(key: str, *values: str) -> bool:
        if not values:
            raise TypeError("if_os expects a key and at least one value, e.g. if_os('ID', 'arch')")
        return facts.os_release.get(key) in values

    def negate(test: Callable[..., bool]) -> Callable[..., bool]:
        def negated(*args: Any) -> bool:
            return not test(*args)

        return negated

    return {
        "hostname": facts.hostname,
        "user": facts.user,
        "uid": facts.uid,
        "platform": facts.platform,
        "os_release": facts.os_release,
        "get_mine": get_mine,
        "if_host": if_host,
        "if_user": if_user,
        "if_uid": if_uid,
        "if_os": if_os,
        "unless_host": negate(if_host),
        "unless_user": negate(if_user),
        "unless_uid": negate(if_uid),
        "unless_os": negate(if_os),
    }
