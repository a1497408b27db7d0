"""
Tests for the resource accessors – record mapping and the envelopes each
operation sends, served by the in-process fake controller.
"""

import ipaddress
import unittest
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from unleashed_web.client import Client
from unleashed_web.config import CMDSTAT_PATH, CONF_PATH
from unleashed_web.errors import ApplicationError, DecodeError, FormatError, ValidationError
from unleashed_web.resources.snmp import SnmpTrap, SnmpUser, SnmpV2, SnmpV3
from unleashed_web.resources.wlans import (
    Wlan,
    WlanAuthentication,
    WlanEncryption,
    WlanEnablement,
    WlanWpa,
    new_wlan,
)
from unleashed_web.scalars import MacAddress, QueuePriority, WeeklySchedule

from fake_controller import mounted_session

MAC = MacAddress.parse("aa:bb:cc:00:11:22")


def _envelope(inner):
    return b'<ajax-response><response type="object" id="x">' + inner + b"</response></ajax-response>"


class ResourceTestCase(unittest.TestCase):
    def setUp(self):
        http, self.fake = mounted_session()
        self.client = Client("unleashed.local", "admin", "pw", http=http)

    def sent(self):
        """The last envelope the client posted, parsed."""
        return ET.fromstring(self.fake.requests[-1].body)


class TestSysinfo(ResourceTestCase):
    def test_get(self):
        self.fake.route(CMDSTAT_PATH, body=_envelope(
            b'<response><sysinfo uptime="86400" version="200.13" model="R650" maxap="128"'
            b' max_connect_ap="16" eth-num="2"/></response>'
        ))
        info = self.client.sysinfo()
        self.assertEqual(info.uptime, 86400)
        self.assertEqual(info.model, "R650")
        self.assertEqual(info.max_ap, 128)
        self.assertEqual(info.max_connect_ap, 16)
        sent = self.sent()
        self.assertEqual((sent.get("action"), sent.get("comp")), ("getstat", "system"))
        self.assertEqual(sent[0].tag, "sysinfo")

    def test_missing_sysinfo(self):
        self.fake.route(CMDSTAT_PATH, body=_envelope(b"<response/>"))
        with self.assertRaises(DecodeError):
            self.client.sysinfo()


class TestAPs(ResourceTestCase):
    def test_list(self):
        self.fake.route(CONF_PATH, body=_envelope(
            b'<ap-list>'
            b'<ap id="1" mac="AA:BB:CC:00:11:22" devname="lobby" model="r650" ip="10.0.0.5"'
            b' last-seen="1700000000" mesh-enabled="true" ext-ip="">'
            b'<radio radio-type="11na" radio-id="1" channel="36" enabled="1"/>'
            b'<radio radio-type="11ng" radio-id="0" channel="auto" enabled="0"/>'
            b'</ap></ap-list>'
        ))
        aps = self.client.aps.list()
        self.assertEqual(len(aps), 1)
        ap = aps[0]
        self.assertEqual(ap.mac, MAC)
        self.assertEqual(ap.ip, ipaddress.ip_address("10.0.0.5"))
        self.assertIsNone(ap.ext_ip)
        self.assertTrue(ap.mesh_enabled)
        self.assertEqual(ap.last_seen, datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))
        self.assertEqual([r.channel for r in ap.radios], ["36", "auto"])
        self.assertEqual([r.enabled for r in ap.radios], [True, False])
        self.assertEqual(self.sent().get("DECRYPT_X"), "false")

    def test_list_statuses(self):
        self.fake.route(CMDSTAT_PATH, body=_envelope(
            b'<apstamgr-stat><ap mac="aa:bb:cc:00:11:22" state="1" devname="lobby">'
            b'<history rx-bytes-2.4g="1700000000,10,1700000300,20" tx-bytes-5g="1700000000,5"'
            b' rssi="1700000000,3,1,0,1"/>'
            b'</ap></apstamgr-stat>'
        ))
        status = self.client.aps.list_statuses()[0]
        self.assertEqual(status.devname, "lobby")
        self.assertEqual([s.count for s in status.history.rx_bytes_24g], [10, 20])
        self.assertEqual(status.history.tx_bytes_5g[0].count, 5)
        self.assertEqual(status.history.rx_bytes_5g, [])
        self.assertEqual(status.history.rssi.trailing, 1)
        payload = self.sent()[0]
        self.assertEqual((payload.tag, payload.get("LEVEL"), payload.get("PERIOD")), ("ap", "1", "3600"))

    def test_bad_series_is_format_error(self):
        self.fake.route(CMDSTAT_PATH, body=_envelope(
            b'<apstamgr-stat><ap><history rx-bytes-5g="1700000000"/></ap></apstamgr-stat>'
        ))
        with self.assertRaises(FormatError):
            self.client.aps.list_statuses()


class TestWlanRecord(unittest.TestCase):
    def test_new_wlan_defaults(self):
        wlan = new_wlan("guest")
        self.assertEqual((wlan.name, wlan.ssid, wlan.description), ("guest", "guest", "guest"))
        self.assertEqual(wlan.usage, "user")
        self.assertIs(wlan.queue_priority, QueuePriority.HIGH)
        self.assertIs(wlan.enable_type, WlanEnablement.ALWAYS_ON)
        self.assertEqual(wlan.max_clients_per_radio, 100)
        self.assertEqual(wlan.qos.uplink_preset, "DISABLE")
        wlan.validate()

    def test_to_element(self):
        element = new_wlan("guest").to_element()
        self.assertEqual(element.tag, "wlansvc")
        self.assertNotIn("id", element.attrib)
        self.assertNotIn("eap-type", element.attrib)
        self.assertEqual(element.get("encryption"), "none")
        self.assertEqual(element.get("authentication"), "open")
        self.assertEqual(element.get("enable-type"), "0")
        self.assertEqual(element.get("do-802-11d"), "enabled")
        self.assertEqual(element.get("sta-info-extraction"), "1")
        self.assertEqual(element.get("wifi6"), "true")
        self.assertIsNone(element.find("wpa"))
        self.assertEqual(element.find("queue-priority").attrib,
                         {"voice": "0", "video": "2", "data": "4", "background": "6"})
        self.assertEqual(element.find("rrm").get("neighbor-report"), "disabled")
        self.assertEqual(len(element.find("wlan-schedule").get("value").split(":")), 28)
        self.assertEqual(
            [child.tag for child in element],
            ["queue-priority", "qos", "rrm", "smartcast", "wlan-schedule",
             "avp-policy", "urlfiltering-policy", "wificalling-policy"],
        )

    def test_element_round_trip(self):
        wlan = new_wlan("corp")
        wlan.id = 3
        wlan.encryption = WlanEncryption.WPA2
        wlan.wpa = WlanWpa(passphrase="correct horse", x_passphrase="correct horse")
        wlan.schedule = WeeklySchedule.always()
        wlan.enable_type = WlanEnablement.SCHEDULED
        self.assertEqual(Wlan.from_element(wlan.to_element()), wlan)

    def test_authentication_accepts_ordinal(self):
        element = new_wlan("x1").to_element()
        element.set("authentication", "1")
        self.assertIs(Wlan.from_element(element).authentication, WlanAuthentication.EAP_8021X)

    def test_invalid_encryption(self):
        element = new_wlan("x1").to_element()
        element.set("encryption", "wep")
        with self.assertRaises(FormatError):
            Wlan.from_element(element)

    def test_schedule_without_value(self):
        element = new_wlan("x1").to_element()
        del element.find("wlan-schedule").attrib["value"]
        with self.assertRaises(FormatError):
            Wlan.from_element(element)

    def test_passphrases_hidden_from_repr(self):
        self.assertNotIn("secretpass", repr(WlanWpa(passphrase="secretpass")))


class TestWlanValidation(unittest.TestCase):
    def _wlan(self, encryption, **wpa):
        wlan = new_wlan("corp")
        wlan.encryption = encryption
        wlan.wpa = WlanWpa(**wpa) if wpa else None
        return wlan

    def test_ssid_length(self):
        wlan = new_wlan("x")
        with self.assertRaises(ValidationError):
            wlan.validate()

    def test_wpa2_requires_wpa(self):
        with self.assertRaises(ValidationError):
            self._wlan(WlanEncryption.WPA2).validate()

    def test_open_forbids_wpa(self):
        with self.assertRaises(ValidationError):
            self._wlan(WlanEncryption.OWE, passphrase="12345678", x_passphrase="12345678").validate()

    def test_psk_rules(self):
        self._wlan(WlanEncryption.WPA2, passphrase="a" * 63, x_passphrase="a" * 63).validate()
        self._wlan(WlanEncryption.WPA2, passphrase="ab" * 32, x_passphrase="ab" * 32).validate()
        for bad in ("short", "g" * 64, " leading space", "trailing space "):
            with self.assertRaises(ValidationError):
                self._wlan(WlanEncryption.WPA2, passphrase=bad, x_passphrase=bad).validate()

    def test_sae_rules(self):
        self._wlan(WlanEncryption.WPA3, sae_passphrase="a" * 63, x_sae_passphrase="a" * 63).validate()
        with self.assertRaises(ValidationError):
            self._wlan(WlanEncryption.WPA3, sae_passphrase="ab" * 32, x_sae_passphrase="ab" * 32).validate()

    def test_mixed_needs_both(self):
        with self.assertRaises(ValidationError):
            self._wlan(WlanEncryption.WPA2_WPA3_MIXED, passphrase="12345678", x_passphrase="12345678").validate()

    def test_validation_error_is_value_error(self):
        self.assertTrue(issubclass(ValidationError, ValueError))


class TestWlans(ResourceTestCase):
    def test_list(self):
        self.fake.route(CONF_PATH, body=_envelope(
            b'<wlansvc-list>'
            b'<wlansvc id="1" name="home" ssid="home" encryption="wpa2" authentication="open">'
            b'<wpa cipher="aes" passphrase="hunter22" x-passphrase="hunter22" dynamic-psk="disabled"/>'
            b'<queue-priority voice="1" video="3" data="5" background="7"/>'
            b'</wlansvc>'
            b'</wlansvc-list>'
        ))
        wlans = self.client.wlans.list()
        self.assertEqual(wlans[0].id, 1)
        self.assertIs(wlans[0].encryption, WlanEncryption.WPA2)
        self.assertEqual(wlans[0].wpa.passphrase, "hunter22")
        self.assertIs(wlans[0].queue_priority, QueuePriority.LOW)
        sent = self.sent()
        self.assertEqual((sent.get("action"), sent.get("comp"), sent.get("DECRYPT_X")),
                         ("getconf", "wlansvc-list", "true"))

    def test_create_clears_id(self):
        self.fake.route(CONF_PATH, body=_envelope(b'<wlansvc id="7" name="guest" ssid="guest"/>'))
        wlan = new_wlan("guest")
        wlan.id = 99
        created = self.client.wlans.create(wlan)
        self.assertEqual(created.id, 7)
        self.assertEqual(wlan.id, 99)
        sent = self.sent()
        self.assertEqual(sent.get("action"), "addobj")
        self.assertNotIn("id", sent[0].attrib)

    def test_create_validates_before_sending(self):
        with self.assertRaises(ValidationError):
            self.client.wlans.create(new_wlan("x"))
        self.assertEqual(self.fake.requests, [])

    def test_update(self):
        self.fake.route(CONF_PATH, body=_envelope(b""))
        wlan = new_wlan("guest")
        wlan.id = 4
        self.client.wlans.update(wlan)
        sent = self.sent()
        self.assertEqual(sent.get("action"), "updobj")
        self.assertEqual(sent[0].get("id"), "4")

    def test_update_requires_id(self):
        with self.assertRaises(ValidationError):
            self.client.wlans.update(new_wlan("guest"))

    def test_delete(self):
        self.fake.route(CONF_PATH, body=_envelope(b""))
        self.client.wlans.delete(4)
        sent = self.sent()
        self.assertEqual(sent.get("action"), "delobj")
        self.assertEqual(ET.tostring(sent[0]), b'<wlansvc id="4" />')

    def test_delete_unknown_reports_xmsg(self):
        self.fake.route(CONF_PATH, body=_envelope(b'<xmsg type="error" msg="Not found" lmsg="no such WLAN"/>'))
        with self.assertRaises(ApplicationError):
            self.client.wlans.delete(42)

    def test_list_statuses(self):
        self.fake.route(CMDSTAT_PATH, body=_envelope(
            b'<apstamgr-stat><wlan id="1" ssid="home" assoc-stas="3" state="up">'
            b'<history rx-bytes="1700000000,100" tx-bytes="" rssi="1700000000,2,1,0"/>'
            b'</wlan></apstamgr-stat>'
        ))
        status = self.client.wlans.list_statuses()[0]
        self.assertEqual((status.id, status.ssid, status.assoc_stas), (1, "home", 3))
        self.assertEqual(status.history.rx_bytes[0].count, 100)
        self.assertEqual(status.history.tx_bytes, [])
        self.assertEqual(status.history.rssi[0].excellent, 2)


class TestStations(ResourceTestCase):
    def test_list(self):
        self.fake.route(CMDSTAT_PATH, body=_envelope(
            b'<apstamgr-stat>'
            b'<client mac="aa:bb:cc:00:11:22" ap="11:22:33:44:55:66" wlan="home" ip="10.0.0.23"'
            b' favourite="1" iot="0" blocked="0" first-assoc="1700000000" total-rx-bytes="123456789"'
            b' hostname="laptop" rssi="-48"/>'
            b'</apstamgr-stat>'
        ))
        station = self.client.stations.list()[0]
        self.assertEqual(station.mac, MAC)
        self.assertTrue(station.favourite)
        self.assertFalse(station.legacy)
        self.assertEqual(station.rssi, -48)
        self.assertEqual(station.total_rx_bytes, 123456789)
        self.assertEqual(self.sent()[0].attrib, {})

    def test_list_by_wlan(self):
        self.fake.route(CMDSTAT_PATH, body=_envelope(b"<apstamgr-stat/>"))
        self.assertEqual(self.client.stations.list_by_wlan("home"), [])
        self.assertEqual(self.sent()[0].attrib, {"wlan": "home", "USE_REGEX": "false"})

    def _command(self):
        self.fake.route(CMDSTAT_PATH, body=b'<ajax-request action="docmd"/>')

    def test_set_favorite(self):
        self._command()
        self.client.stations.set_favorite(MAC, True)
        sent = self.sent()
        self.assertEqual(sent.get("action"), "docmd")
        self.assertEqual(sent.get("xcmd"), "stamgr")
        self.assertEqual(sent.get("comp"), "stamgr")
        self.assertEqual(sent[0].tag, "xcmd")
        self.assertEqual(sent[0].attrib, {
            "cmd": "favourite", "tag": "client", "enable": "1", "client": "aa:bb:cc:00:11:22",
        })

    def test_set_legacy(self):
        self._command()
        self.client.stations.set_legacy(MAC, False)
        self.assertEqual(self.sent()[0].get("cmd"), "mark-iot")
        self.assertEqual(self.sent()[0].get("enable"), "0")

    def test_set_name_and_forget(self):
        self._command()
        self.client.stations.set_name(MAC, "printer")
        self.assertEqual(self.sent()[0].attrib, {
            "cmd": "rename", "tag": "client", "client": "aa:bb:cc:00:11:22", "rename": "printer",
        })
        self.client.stations.set_name(MAC, "")
        self.assertEqual(self.sent()[0].get("rename"), "")


class TestSnmp(ResourceTestCase):
    def test_get_v2(self):
        self.fake.route(CONF_PATH, body=_envelope(
            b'<resultset><snmp snmpv2-ap="false" ver="2" enabled="true" sys-contact="noc@example.net"'
            b' sys-location="closet" ro-community="public" rw-community="private"/></resultset>'
        ))
        settings = self.client.snmp.get_v2()
        self.assertTrue(settings.enabled)
        self.assertFalse(settings.snmpv2_ap)
        self.assertEqual(settings.sys_location, "closet")
        self.assertEqual(settings.ro_community, "public")
        self.assertNotIn("private", repr(settings))
        sent = self.sent()
        self.assertEqual((sent.get("action"), sent.get("comp"), sent[0].tag), ("getconf", "system", "snmp"))

    def test_unexpected_root(self):
        self.fake.route(CONF_PATH, body=_envelope(b"<snmp/>"))
        with self.assertRaises(DecodeError):
            self.client.snmp.get_v2()

    def test_set_v2(self):
        self.fake.route(CONF_PATH, body=_envelope(b""))
        self.client.snmp.set_v2(SnmpV2(enabled=True, sys_contact="noc", ro_community="public"))
        sent = self.sent()
        self.assertEqual(sent.get("action"), "setconf")
        self.assertEqual(sent[0].tag, "snmp")
        self.assertEqual(sent[0].get("enabled"), "true")
        self.assertEqual(sent[0].get("ver"), "2")
        self.assertEqual(sent[0].get("ro-community"), "public")

    def test_get_v3_users(self):
        self.fake.route(CONF_PATH, body=_envelope(
            b'<resultset><snmpv3 enabled="true" ver="3">'
            b'<snmpusr role="ro" name="monitor" auth="SHA" authPP="authsecret" priv="AES" privPP="privsecret"/>'
            b'<snmpusr role="rw" name="admin" auth="MD5" priv="None"/>'
            b'</snmpv3></resultset>'
        ))
        settings = self.client.snmp.get_v3()
        self.assertTrue(settings.enabled)
        self.assertEqual([u.name for u in settings.users], ["monitor", "admin"])
        self.assertEqual(settings.users[0].auth_passphrase, "authsecret")
        self.assertNotIn("privsecret", repr(settings))
        self.assertEqual(self.sent()[0].tag, "snmpv3")

    def test_get_v3_missing_block(self):
        self.fake.route(CONF_PATH, body=_envelope(b'<resultset><snmp enabled="true"/></resultset>'))
        with self.assertRaises(DecodeError):
            self.client.snmp.get_v3()

    def test_set_v3(self):
        self.fake.route(CONF_PATH, body=_envelope(b""))
        self.client.snmp.set_v3(SnmpV3(enabled=True, users=[SnmpUser(role="ro", name="monitor", auth="SHA")]))
        sent = self.sent()
        self.assertEqual((sent.get("action"), sent[0].tag), ("setconf", "snmpv3"))
        self.assertEqual(sent[0].get("ver"), "3")
        self.assertEqual([u.get("name") for u in sent[0].findall("snmpusr")], ["monitor"])

    def test_get_trap(self):
        self.fake.route(CONF_PATH, body=_envelope(
            b'<resultset><snmp-trap enabled="true" community="traps" ver="2" ip1="10.0.0.9" ip2="">'
            b'<trapusr id="1" name="nms" enabled="true" ip="10.0.0.10" auth="SHA"/>'
            b'</snmp-trap></resultset>'
        ))
        trap = self.client.snmp.get_trap()
        self.assertTrue(trap.enabled)
        self.assertEqual(trap.ip1, ipaddress.ip_address("10.0.0.9"))
        self.assertIsNone(trap.ip2)
        self.assertEqual(trap.users[0].ip, ipaddress.ip_address("10.0.0.10"))
        self.assertEqual(self.sent()[0].tag, "snmp-trap")

    def test_set_trap(self):
        self.fake.route(CONF_PATH, body=_envelope(b""))
        self.client.snmp.set_trap(SnmpTrap(enabled=True, ip1=ipaddress.ip_address("10.0.0.9")))
        payload = self.sent()[0]
        self.assertEqual(payload.tag, "snmp-trap")
        self.assertEqual(payload.get("ip1"), "10.0.0.9")
        self.assertNotIn("ip2", payload.attrib)


class TestAPGroups(ResourceTestCase):
    def test_list(self):
        self.fake.route(CONF_PATH, body=_envelope(
            b'<apgroup-list><apgroup id="1" name="System Default" description="default">'
            b'<ap-property>'
            b'<radio radio-type="11na" channel="auto" tx-power="0" wmm-ac="1" vap-enabled="0"/>'
            b'<radio radio-type="11ng" channel="6" auto-channel-set="true"/>'
            b'<network ipmode="1"/><mesh mesh-mode="auto" max-hops="3"/>'
            b'<chanfly turnOff="false" turnOff-time="0"/><bonjourfencing enable="1" policy="2"/>'
            b'</ap-property>'
            b'<lldp lldp-interval="30" lldp-holdtime="120" enabled="true" lldp-mgmt="enabled">'
            b'<port id="0" lldp-on="enabled"/><port id="1" lldp-on="disabled"/>'
            b'</lldp>'
            b'<wlangroup><wlansvc id="1"/><wlansvc id="4"/></wlangroup>'
            b'</apgroup></apgroup-list>'
        ))
        group = self.client.ap_groups.list()[0]
        self.assertEqual((group.id, group.name), (1, "System Default"))
        self.assertEqual([r.radio_type for r in group.radios], ["11na", "11ng"])
        self.assertTrue(group.radios[0].wmm_ac)
        self.assertFalse(group.radios[0].vap_enabled)
        self.assertTrue(group.radios[1].auto_channel_set)
        self.assertEqual((group.ipmode, group.mesh_mode, group.mesh_max_hops), (1, "auto", 3))
        self.assertTrue(group.bonjour_fencing)
        self.assertEqual(group.bonjour_fencing_policy, 2)
        self.assertTrue(group.lldp_mgmt)
        self.assertEqual([p.lldp_on for p in group.lldp_ports], [True, False])
        self.assertEqual(group.wlan_ids, [1, 4])
        sent = self.sent()
        self.assertEqual((sent.get("comp"), sent.get("DECRYPT_X")), ("apgroup-list", "false"))

    def test_group_without_properties(self):
        self.fake.route(CONF_PATH, body=_envelope(b'<apgroup-list><apgroup id="2" name="lab"/></apgroup-list>'))
        group = self.client.ap_groups.list()[0]
        self.assertEqual(group.radios, [])
        self.assertEqual(group.wlan_ids, [])


class TestAuthServers(ResourceTestCase):
    def test_list(self):
        self.fake.route(CONF_PATH, body=_envelope(
            b'<authsvr-list>'
            b'<authsvr id="1" name="radius" EDITABLE="true" type="radius-auth" encryption="disabled"'
            b' backup="enabled" algorithm="pap" failover-retry="2">'
            b'<primary-radius ip="10.0.0.20" port="1812" secret="s3cret" timeout="3" retry="2"/>'
            b'</authsvr>'
            b'<authsvr id="2" name="corp" type="ad" server1="dc.corp.example" port="389"'
            b' search-base="dc=corp" global-catalog="disabled" admin-pwd="hunter2"/>'
            b'</authsvr-list>'
        ))
        radius, ad = self.client.auth_servers.list()
        self.assertTrue(radius.is_radius)
        self.assertTrue(radius.editable)
        self.assertTrue(radius.backup)
        self.assertEqual((radius.primary_radius.ip, radius.primary_radius.port), ("10.0.0.20", 1812))
        self.assertIsNone(radius.secondary_radius)
        self.assertNotIn("s3cret", repr(radius))
        self.assertFalse(ad.is_radius)
        self.assertEqual((ad.server1, ad.port, ad.search_base), ("dc.corp.example", 389, "dc=corp"))
        self.assertNotIn("hunter2", repr(ad))
        sent = self.sent()
        self.assertEqual((sent.get("comp"), sent.get("DECRYPT_X")), ("authsvr-list", "true"))


if __name__ == "__main__":
    unittest.main()
