import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.config_value import UNKNOWN, from_python
from core.models import DnsRecord, DnsZone
from validators import dns_record, dns_zone


def _record(**attributes):
    return DnsRecord.from_config(from_python(attributes))


def _zone(**attributes):
    return DnsZone.from_config(from_python(attributes))


def test_hostname_records_must_not_end_with_dot():
    diagnostics = dns_record.hostname(_record(type="CNAME", value="cdn.example.com."))

    assert [item.detail for item in diagnostics] == ["The value must not end with a dot"]
    assert str(diagnostics[0].path) == "value"


def test_other_record_types_may_end_with_dot():
    assert len(dns_record.hostname(_record(type="TXT", value="v=spf1."))) == 0


def test_record_value_cannot_be_empty():
    assert [item.detail for item in dns_record.hostname(_record(type="A", value=""))] == ["Attribute cannot be empty"]


def test_record_value_defers_on_unknown():
    assert len(dns_record.hostname(_record(type="CNAME", value=UNKNOWN))) == 0


def test_pullzone_id_required_for_pullzone_records():
    diagnostics = dns_record.pullzone_id(_record(type="PullZone", value="zone", pullzone_id=None))

    assert [item.detail for item in diagnostics] == ["pullzone_id is required"]


def test_pullzone_id_rejected_for_other_types():
    diagnostics = dns_record.pullzone_id(_record(type="A", value="127.0.0.1", pullzone_id=12))

    assert [item.detail for item in diagnostics] == ["pullzone_id is only available for type = PullZone"]
    assert len(dns_record.pullzone_id(_record(type="PullZone", value="zone", pullzone_id=12))) == 0


def test_default_nameservers_pass():
    assert len(dns_zone.custom_nameserver(_zone(nameserver_custom=False))) == 0
    assert len(dns_zone.custom_nameserver(_zone(nameserver1="kiki.bunny.net", nameserver2="coco.bunny.net"))) == 0


def test_non_custom_zone_rejects_changed_nameserver():
    diagnostics = dns_zone.custom_nameserver(_zone(nameserver_custom=False, nameserver1="ns1.example.com"))

    assert [str(item.path) for item in diagnostics] == ["nameserver1"]
    assert diagnostics[0].summary == "Attribute must be default"


def test_custom_zone_requires_all_values_to_differ():
    diagnostics = dns_zone.custom_nameserver(
        _zone(nameserver_custom=True, nameserver1="ns1.example.com", nameserver2=UNKNOWN)
    )

    assert [str(item.path) for item in diagnostics] == ["soa_email"]
    assert diagnostics[0].detail == '"soa_email" must be different than the default value'


def test_unknown_custom_flag_defers():
    assert len(dns_zone.custom_nameserver(_zone(nameserver_custom=UNKNOWN, nameserver1="ns1.example.com"))) == 0
