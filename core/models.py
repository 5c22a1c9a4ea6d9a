"""Typed records populated once from a resource configuration tree.

Leaf fields hold a plain Python value, ``None`` for null or the ``UNKNOWN``
singleton. Collections of blocks become tuples of records, or ``UNKNOWN`` when
the collection or any of its elements is not resolved yet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Tuple, Type, TypeVar, Union

from core.config_value import (
    UNKNOWN,
    CollectionValue,
    ConfigValue,
    ObjectValue,
    SchemaMismatchError,
    UnknownValue,
)
from core.enums import CONTAINER_PROBE_KINDS

T = TypeVar("T")


def _expect_object(value: ConfigValue) -> ObjectValue:
    if not isinstance(value, ObjectValue):
        raise SchemaMismatchError(f"Expected an object, got {value!r}.")
    return value


def _scalar(value: ConfigValue, kind: Union[Type, Tuple[Type, ...]]) -> Any:
    if value.is_unknown:
        return UNKNOWN
    if value.is_null:
        return None
    raw = value.scalar()
    if isinstance(raw, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise SchemaMismatchError(f"Expected {kind}, got boolean {raw!r}.")
    if not isinstance(raw, kind):
        raise SchemaMismatchError(f"Expected {kind}, got {raw!r}.")
    return raw


def _string(value: ConfigValue) -> Union[str, None, UnknownValue]:
    return _scalar(value, str)


def _int(value: ConfigValue) -> Union[int, None, UnknownValue]:
    return _scalar(value, int)


def _bool(value: ConfigValue) -> Union[bool, None, UnknownValue]:
    return _scalar(value, bool)


def _strings(value: ConfigValue) -> Union[Tuple[str, ...], UnknownValue]:
    """Collection of strings; null is treated as empty."""

    if value.is_unknown:
        return UNKNOWN
    if not value.is_null and not isinstance(value, CollectionValue):
        raise SchemaMismatchError(f"Expected a collection, got {value!r}.")
    items = []
    for element in value.elements:
        item = _string(element)
        if item is UNKNOWN:
            return UNKNOWN
        items.append(item)
    return tuple(items)


def _blocks(value: ConfigValue, build: Callable[[ObjectValue], T]) -> Union[Tuple[T, ...], UnknownValue]:
    """Nested block collection; null is treated as empty."""

    if value.is_unknown:
        return UNKNOWN
    if not value.is_null and not isinstance(value, CollectionValue):
        raise SchemaMismatchError(f"Expected a collection of blocks, got {value!r}.")
    records = []
    for element in value.elements:
        if element.is_unknown:
            return UNKNOWN
        records.append(build(_expect_object(element)))
    return tuple(records)


def _optional_blocks(
    value: ConfigValue, build: Callable[[ObjectValue], T]
) -> Union[Tuple[T, ...], None, UnknownValue]:
    """Like :func:`_blocks` but keeps null distinct from an empty collection."""

    if value.is_null:
        return None
    return _blocks(value, build)


def _block(value: ConfigValue, build: Callable[[ObjectValue], T]) -> Union[T, None, UnknownValue]:
    if value.is_unknown:
        return UNKNOWN
    if value.is_null:
        return None
    return build(_expect_object(value))


def _count(value: ConfigValue) -> Union[int, UnknownValue]:
    if value.is_unknown:
        return UNKNOWN
    if not value.is_null and not isinstance(value, CollectionValue):
        raise SchemaMismatchError(f"Expected a collection of blocks, got {value!r}.")
    return len(value.elements)


@dataclass(frozen=True)
class ResourceModel:
    """Base record keeping the raw configuration tree."""

    raw: ObjectValue

    @classmethod
    def from_config(cls, root: ObjectValue) -> "ResourceModel":
        return cls(raw=root)


# compute container app


@dataclass(frozen=True)
class EndpointCdn:
    origin_ssl: Union[bool, None, UnknownValue]


@dataclass(frozen=True)
class EndpointPort:
    container: Union[int, None, UnknownValue]
    exposed: Union[int, None, UnknownValue]
    protocols: Union[Tuple[str, ...], UnknownValue]


@dataclass(frozen=True)
class Endpoint:
    name: Union[str, None, UnknownValue]
    type: Union[str, None, UnknownValue]
    cdn: Union[Tuple[EndpointCdn, ...], UnknownValue]
    ports: Union[Tuple[EndpointPort, ...], UnknownValue]

    @property
    def label(self) -> str:
        if self.name is UNKNOWN:
            return "(known after apply)"
        return self.name or ""


@dataclass(frozen=True)
class Probe:
    type: Union[str, None, UnknownValue]
    port: Union[int, None, UnknownValue]
    http_blocks: Union[int, UnknownValue]
    grpc_blocks: Union[int, UnknownValue]


@dataclass(frozen=True)
class VolumeMount:
    name: Union[str, None, UnknownValue]
    path: Union[str, None, UnknownValue]


@dataclass(frozen=True)
class Volume:
    name: Union[str, None, UnknownValue]


@dataclass(frozen=True)
class Container:
    name: Union[str, None, UnknownValue]
    endpoints: Union[Tuple[Endpoint, ...], UnknownValue]
    volume_mounts: Union[Tuple[VolumeMount, ...], UnknownValue]
    probes: Mapping[str, Union[Tuple[Probe, ...], UnknownValue]] = field(default_factory=dict)


def _endpoint(obj: ObjectValue) -> Endpoint:
    return Endpoint(
        name=_string(obj.get("name")),
        type=_string(obj.get("type")),
        cdn=_blocks(obj.get("cdn"), lambda cdn: EndpointCdn(origin_ssl=_bool(cdn.get("origin_ssl")))),
        ports=_blocks(
            obj.get("port"),
            lambda port: EndpointPort(
                container=_int(port.get("container")),
                exposed=_int(port.get("exposed")),
                protocols=_strings(port.get("protocols")),
            ),
        ),
    )


def _probe(obj: ObjectValue) -> Probe:
    return Probe(
        type=_string(obj.get("type")),
        port=_int(obj.get("port")),
        http_blocks=_count(obj.get("http")),
        grpc_blocks=_count(obj.get("grpc")),
    )


def _container(obj: ObjectValue) -> Container:
    return Container(
        name=_string(obj.get("name")),
        endpoints=_blocks(obj.get("endpoint"), _endpoint),
        volume_mounts=_blocks(
            obj.get("volumemount"),
            lambda mount: VolumeMount(name=_string(mount.get("name")), path=_string(mount.get("path"))),
        ),
        probes={kind: _blocks(obj.get(kind), _probe) for kind in CONTAINER_PROBE_KINDS},
    )


@dataclass(frozen=True)
class ContainerApp(ResourceModel):
    version: Union[int, None, UnknownValue]
    regions_allowed: Union[Tuple[str, ...], UnknownValue]
    regions_required: Union[Tuple[str, ...], UnknownValue]
    containers: Union[Tuple[Container, ...], UnknownValue]
    volumes: Union[Tuple[Volume, ...], UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "ContainerApp":
        return cls(
            raw=root,
            version=_int(root.get("version")),
            regions_allowed=_strings(root.get("regions_allowed")),
            regions_required=_strings(root.get("regions_required")),
            containers=_blocks(root.get("container"), _container),
            volumes=_blocks(root.get("volume"), lambda volume: Volume(name=_string(volume.get("name")))),
        )


# pull zone edge rule


@dataclass(frozen=True)
class EdgeRuleAction:
    type: Union[str, None, UnknownValue]
    parameter1: Union[str, None, UnknownValue]
    parameter2: Union[str, None, UnknownValue]
    parameter3: Union[str, None, UnknownValue]


@dataclass(frozen=True)
class EdgeRuleTrigger:
    type: Union[str, None, UnknownValue]
    match_type: Union[str, None, UnknownValue]
    patterns: Union[Tuple[str, ...], UnknownValue]


def _edge_rule_action(obj: ObjectValue) -> EdgeRuleAction:
    return EdgeRuleAction(
        type=_string(obj.get("type")),
        parameter1=_string(obj.get("parameter1")),
        parameter2=_string(obj.get("parameter2")),
        parameter3=_string(obj.get("parameter3")),
    )


@dataclass(frozen=True)
class EdgeRule(ResourceModel):
    action: Union[str, None, UnknownValue]
    action_parameter1: Union[str, None, UnknownValue]
    action_parameter2: Union[str, None, UnknownValue]
    action_parameter3: Union[str, None, UnknownValue]
    actions: Union[Tuple[EdgeRuleAction, ...], None, UnknownValue]
    triggers: Union[Tuple[EdgeRuleTrigger, ...], UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "EdgeRule":
        return cls(
            raw=root,
            action=_string(root.get("action")),
            action_parameter1=_string(root.get("action_parameter1")),
            action_parameter2=_string(root.get("action_parameter2")),
            action_parameter3=_string(root.get("action_parameter3")),
            actions=_optional_blocks(root.get("actions"), _edge_rule_action),
            triggers=_blocks(
                root.get("triggers"),
                lambda trigger: EdgeRuleTrigger(
                    type=_string(trigger.get("type")),
                    match_type=_string(trigger.get("match_type")),
                    patterns=_strings(trigger.get("patterns")),
                ),
            ),
        )


# pull zone shield


@dataclass(frozen=True)
class ShieldWaf:
    realtime_threat_intelligence: Union[bool, None, UnknownValue]


@dataclass(frozen=True)
class AccessList:
    id: Union[int, None, UnknownValue]
    action: Union[str, None, UnknownValue]


@dataclass(frozen=True)
class Shield(ResourceModel):
    tier: Union[str, None, UnknownValue]
    whitelabel: Union[bool, None, UnknownValue]
    bot_detection: Union[ObjectValue, None, UnknownValue]
    waf: Union[ShieldWaf, None, UnknownValue]
    access_lists: Union[Tuple[AccessList, ...], UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "Shield":
        return cls(
            raw=root,
            tier=_string(root.get("tier")),
            whitelabel=_bool(root.get("whitelabel")),
            bot_detection=_block(root.get("bot_detection"), lambda obj: obj),
            waf=_block(
                root.get("waf"),
                lambda obj: ShieldWaf(realtime_threat_intelligence=_bool(obj.get("realtime_threat_intelligence"))),
            ),
            access_lists=_blocks(
                root.get("access_list"),
                lambda obj: AccessList(id=_int(obj.get("id")), action=_string(obj.get("action"))),
            ),
        )


# storage zone


@dataclass(frozen=True)
class StorageZone(ResourceModel):
    zone_tier: Union[str, None, UnknownValue]
    region: Union[str, None, UnknownValue]
    replication_regions: Union[Tuple[str, ...], UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "StorageZone":
        return cls(
            raw=root,
            zone_tier=_string(root.get("zone_tier")),
            region=_string(root.get("region")),
            replication_regions=_strings(root.get("replication_regions")),
        )


# pull zone


@dataclass(frozen=True)
class PullzoneOrigin:
    type: Union[str, None, UnknownValue]
    url: Union[str, None, UnknownValue]
    middleware_script: Union[int, None, UnknownValue]


@dataclass(frozen=True)
class PullzoneRouting:
    filters: Union[Tuple[str, ...], UnknownValue]


@dataclass(frozen=True)
class Pullzone(ResourceModel):
    origin: Union[PullzoneOrigin, None, UnknownValue]
    routing: Union[PullzoneRouting, None, UnknownValue]
    permacache_storagezone: Union[int, None, UnknownValue]
    cache_expiration_time: Union[int, None, UnknownValue]
    cache_stale: Union[Tuple[str, ...], UnknownValue]
    use_background_update: Union[bool, None, UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "Pullzone":
        return cls(
            raw=root,
            origin=_block(
                root.get("origin"),
                lambda obj: PullzoneOrigin(
                    type=_string(obj.get("type")),
                    url=_string(obj.get("url")),
                    middleware_script=_int(obj.get("middleware_script")),
                ),
            ),
            routing=_block(root.get("routing"), lambda obj: PullzoneRouting(filters=_strings(obj.get("filters")))),
            permacache_storagezone=_int(root.get("permacache_storagezone")),
            cache_expiration_time=_int(root.get("cache_expiration_time")),
            cache_stale=_strings(root.get("cache_stale")),
            use_background_update=_bool(root.get("use_background_update")),
        )


@dataclass(frozen=True)
class PullzoneHostname(ResourceModel):
    certificate: Union[str, None, UnknownValue]
    tls_enabled: Union[bool, None, UnknownValue]
    force_ssl: Union[bool, None, UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "PullzoneHostname":
        return cls(
            raw=root,
            certificate=_string(root.get("certificate")),
            tls_enabled=_bool(root.get("tls_enabled")),
            force_ssl=_bool(root.get("force_ssl")),
        )


# dns


@dataclass(frozen=True)
class DnsRecord(ResourceModel):
    type: Union[str, None, UnknownValue]
    value: Union[str, None, UnknownValue]
    pullzone_id: Union[int, None, UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "DnsRecord":
        return cls(
            raw=root,
            type=_string(root.get("type")),
            value=_string(root.get("value")),
            pullzone_id=_int(root.get("pullzone_id")),
        )


@dataclass(frozen=True)
class DnsZone(ResourceModel):
    nameserver_custom: Union[bool, None, UnknownValue]
    nameserver1: Union[str, None, UnknownValue]
    nameserver2: Union[str, None, UnknownValue]
    soa_email: Union[str, None, UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "DnsZone":
        return cls(
            raw=root,
            nameserver_custom=_bool(root.get("nameserver_custom")),
            nameserver1=_string(root.get("nameserver1")),
            nameserver2=_string(root.get("nameserver2")),
            soa_email=_string(root.get("soa_email")),
        )


# stream library


@dataclass(frozen=True)
class StreamLibrary(ResourceModel):
    encoding_tier: Union[str, None, UnknownValue]
    jit_encoding: Union[bool, None, UnknownValue]
    early_play_enabled: Union[bool, None, UnknownValue]
    output_codecs: Union[Tuple[str, ...], UnknownValue]

    @classmethod
    def from_config(cls, root: ObjectValue) -> "StreamLibrary":
        return cls(
            raw=root,
            encoding_tier=_string(root.get("encoding_tier")),
            jit_encoding=_bool(root.get("jit_encoding")),
            early_play_enabled=_bool(root.get("early_play_enabled")),
            output_codecs=_strings(root.get("output_codecs")),
        )
