"""
Tests for the conf / cmdstat envelopes.

The session is a MagicMock: ``post_xml`` returns canned bodies and the
encoded request is inspected from its call arguments.
"""

import unittest
import xml.etree.ElementTree as ET
from unittest.mock import MagicMock

from unleashed_web.config import CMDSTAT_PATH, CONF_PATH
from unleashed_web.envelope import (
    CmdstatRequest,
    ConfRequest,
    decode_cmdstat_response,
    decode_conf_response,
    encode_envelope,
    execute_cmdstat,
    execute_conf,
)
from unleashed_web.errors import ApplicationError, DecodeError, TransportError


def _session(body):
    session = MagicMock()
    session.ensure_token.return_value = "tok"
    session.post_xml.return_value = body
    return session


def _sent(session):
    path, body = session.post_xml.call_args.args[:2]
    return path, ET.fromstring(body)


class TestRequestEncoding(unittest.TestCase):
    def test_conf_attribute_order(self):
        body = encode_envelope(ConfRequest("getconf", "wlansvc-list", decrypt=True))
        self.assertEqual(
            body,
            b'<ajax-request action="getconf" DECRYPT_X="true" updater="" comp="wlansvc-list" />',
        )

    def test_conf_without_decrypt_flag(self):
        root = ET.fromstring(encode_envelope(ConfRequest("setconf", "system", payload=ET.Element("snmp"))))
        self.assertNotIn("DECRYPT_X", root.attrib)
        self.assertEqual(root[0].tag, "snmp")

    def test_cmdstat_default_caller(self):
        root = ET.fromstring(encode_envelope(CmdstatRequest("getstat", "system")))
        self.assertEqual(root.attrib, {"action": "getstat", "caller": "", "updater": "", "comp": "system"})

    def test_cmdstat_custom_attrs(self):
        root = ET.fromstring(encode_envelope(CmdstatRequest("docmd", "stamgr", attrs={"xcmd": "stamgr"})))
        self.assertEqual(root.get("xcmd"), "stamgr")
        self.assertNotIn("caller", root.attrib)


class TestConfResponse(unittest.TestCase):
    def test_payload_and_metadata(self):
        response = decode_conf_response(
            b'<ajax-response><response type="object" id="wlansvc-list.0">'
            b'<wlansvc-list><wlansvc id="1"/></wlansvc-list></response></ajax-response>'
        )
        self.assertEqual(response.type, "object")
        self.assertEqual(response.id, "wlansvc-list.0")
        self.assertIsNone(response.xmsg)
        self.assertEqual(response.payload.tag, "wlansvc-list")
        self.assertEqual(response.raw, b'<wlansvc-list><wlansvc id="1" /></wlansvc-list>')

    def test_wrong_root(self):
        with self.assertRaises(DecodeError):
            decode_conf_response(b"<html/>")

    def test_malformed_xml(self):
        with self.assertRaises(DecodeError):
            decode_conf_response(b"<ajax-response><response>")


class TestExecuteConf(unittest.TestCase):
    def test_decodes_payload(self):
        session = _session(
            b'<ajax-response><response type="object" id="x">'
            b'<wlansvc-list><wlansvc id="1"/><wlansvc id="4"/></wlansvc-list>'
            b'</response></ajax-response>'
        )
        ids = execute_conf(
            session, "getconf", "wlansvc-list", decrypt=True,
            decode=lambda el: [int(w.get("id")) for w in el.findall("wlansvc")],
        )
        self.assertEqual(ids, [1, 4])
        session.ensure_token.assert_called_once()
        path, root = _sent(session)
        self.assertEqual(path, CONF_PATH)
        self.assertEqual(root.get("comp"), "wlansvc-list")

    def test_xmsg_wins_over_payload(self):
        session = _session(
            b'<ajax-response><response type="object" id="x">'
            b'<xmsg type="error" msg="Object exists" name="wlansvc" lmsg="WLAN name already in use"/>'
            b'<wlansvc id="9" name="guest"/>'
            b'</response></ajax-response>'
        )
        decode = MagicMock()
        with self.assertRaises(ApplicationError) as ctx:
            execute_conf(session, "addobj", "wlansvc-list", ET.Element("wlansvc"), decode=decode)
        self.assertEqual(ctx.exception.msg, "Object exists")
        self.assertEqual(ctx.exception.lmsg, "WLAN name already in use")
        self.assertEqual(str(ctx.exception), "xmsg error: Object exists: WLAN name already in use")
        decode.assert_not_called()

    def test_no_decode_means_no_content(self):
        session = _session(b'<ajax-response><response type="object" id="x"/></ajax-response>')
        self.assertIsNone(execute_conf(session, "delobj", "wlansvc-list", ET.Element("wlansvc", {"id": "3"})))
        _, root = _sent(session)
        self.assertEqual(root[0].get("id"), "3")

    def test_missing_payload_with_decode(self):
        session = _session(b'<ajax-response><response type="object" id="x"/></ajax-response>')
        with self.assertRaises(DecodeError):
            execute_conf(session, "getconf", "system", decode=lambda el: el)

    def test_decode_value_error_becomes_decode_error(self):
        session = _session(b'<ajax-response><response><snmp ver="two"/></response></ajax-response>')
        with self.assertRaises(DecodeError):
            execute_conf(session, "getconf", "system", decode=lambda el: int(el.get("ver")))

    def test_payload_object_with_to_element(self):
        payload = MagicMock()
        payload.to_element.return_value = ET.Element("snmp", {"enabled": "true"})
        session = _session(b'<ajax-response><response/></ajax-response>')
        execute_conf(session, "setconf", "system", payload)
        _, root = _sent(session)
        self.assertEqual(root[0].get("enabled"), "true")

    def test_transport_error_propagates(self):
        session = _session(b"")
        session.post_xml.side_effect = TransportError("XML post returned status code 500", status=500)
        with self.assertRaises(TransportError):
            execute_conf(session, "getconf", "system")


class TestExecuteCmdstat(unittest.TestCase):
    def test_returns_response_element(self):
        session = _session(
            b'<ajax-response><response type="object" id="DEH">'
            b'<apstamgr-stat><client mac="aa:bb:cc:dd:ee:ff"/></apstamgr-stat>'
            b'</response></ajax-response>'
        )
        response = execute_cmdstat(session, "getstat", "stamgr", ET.Element("client"))
        self.assertEqual(response.tag, "response")
        self.assertEqual(len(response.findall("apstamgr-stat/client")), 1)
        path, root = _sent(session)
        self.assertEqual(path, CMDSTAT_PATH)
        self.assertEqual(root.get("caller"), "")

    def test_command_ack_echoing_request_root(self):
        self.assertIsNone(decode_cmdstat_response(b'<ajax-request action="docmd"/>'))

    def test_decode_requires_response(self):
        session = _session(b'<ajax-response/>')
        with self.assertRaises(DecodeError):
            execute_cmdstat(session, "getstat", "system", decode=lambda el: el)

    def test_wrong_root(self):
        with self.assertRaises(DecodeError):
            decode_cmdstat_response(b"<html><body/></html>")


if __name__ == "__main__":
    unittest.main()
