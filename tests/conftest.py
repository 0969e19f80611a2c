"""Pytest fixtures for overpass_graph tests."""
import pytest
import requests


SNAPSHOT_JSON = b'''{
  "version": 0.6,
  "generator": "Overpass API 0.7.62",
  "osm3s": {
    "timestamp_osm_base": "2024-05-01T10:00:00Z",
    "copyright": "The data included in this document is from www.openstreetmap.org."
  },
  "elements": [
    {"type": "relation", "id": 1000, "timestamp": "2023-01-02T03:04:05Z", "version": 3,
     "changeset": 77, "user": "mapper", "uid": 5,
     "members": [
       {"type": "way", "ref": 100, "role": "outer"},
       {"type": "node", "ref": 1, "role": "stop"}
     ],
     "tags": {"type": "route", "route": "bus"}},
    {"type": "way", "id": 100, "nodes": [1, 2, 3, 1],
     "tags": {"building": "yes"}},
    {"type": "node", "id": 1, "lat": 51.5, "lon": -0.1,
     "tags": {"amenity": "cafe", "name": "Test Cafe"}},
    {"type": "node", "id": 2, "lat": 51.51, "lon": -0.11},
    {"type": "node", "id": 3, "lat": 51.52, "lon": -0.12}
  ]
}'''


SNAPSHOT_XML = b'''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="Overpass API 0.7.62">
  <note>The data included in this document is from www.openstreetmap.org.</note>
  <meta osm_base="2024-05-01T10:00:00Z"/>
  <node id="1" lat="51.5" lon="-0.1">
    <tag k="amenity" v="cafe"/>
    <tag k="name" v="Test Cafe"/>
  </node>
  <node id="2" lat="51.51" lon="-0.11"/>
  <node id="3" lat="51.52" lon="-0.12"/>
  <way id="100">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
    <nd ref="1"/>
    <tag k="building" v="yes"/>
  </way>
  <relation id="1000" timestamp="2023-01-02T03:04:05Z" version="3" changeset="77" user="mapper" uid="5">
    <member type="way" ref="100" role="outer"/>
    <member type="node" ref="1" role="stop"/>
    <tag k="type" v="route"/>
    <tag k="route" v="bus"/>
  </relation>
</osm>'''


DIFF_XML = b'''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="Overpass API 0.7.62">
  <meta osm_base="2024-05-01T10:00:00Z"/>
  <action type="create">
    <node id="10" lat="1.0" lon="2.0" version="1" timestamp="2024-04-01T00:00:00Z" changeset="500" user="alice" uid="11">
      <tag k="shop" v="bakery"/>
    </node>
  </action>
  <action type="modify">
    <old>
      <node id="20" lat="3.0" lon="4.0" version="1" changeset="400" user="bob" uid="12"/>
    </old>
    <new>
      <node id="20" lat="3.5" lon="4.5" version="2" changeset="501" user="alice" uid="11">
        <tag k="name" v="Moved"/>
      </node>
    </new>
  </action>
  <action type="modify">
    <old>
      <way id="200" version="1">
        <nd ref="10" lat="1.0" lon="2.0"/>
        <nd ref="20" lat="3.0" lon="4.0"/>
      </way>
    </old>
    <new>
      <way id="200" version="2">
        <nd ref="10" lat="1.0" lon="2.0"/>
        <nd ref="20" lat="3.5" lon="4.5"/>
        <tag k="highway" v="path"/>
      </way>
    </new>
  </action>
  <action type="delete">
    <old>
      <node id="30" lat="5.0" lon="6.0" version="4" visible="true">
        <tag k="amenity" v="bench"/>
      </node>
    </old>
    <new>
      <node id="30" visible="false" version="5" changeset="502" user="alice" uid="11"/>
    </new>
  </action>
</osm>'''


@pytest.fixture
def snapshot_json():
    return SNAPSHOT_JSON


@pytest.fixture
def snapshot_xml():
    return SNAPSHOT_XML


@pytest.fixture
def diff_xml():
    return DIFF_XML


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, body=b"", reason="OK", read_error=None):
        self.status_code = status_code
        self.reason = reason
        self._body = body
        self._read_error = read_error

    @property
    def content(self):
        if self._read_error is not None:
            raise self._read_error
        return self._body


class FakeSession:
    """Session double returning a canned response or raising an error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_session():
    """Factory for FakeSession instances."""
    def make(status_code=200, body=b"", reason="OK", read_error=None, error=None):
        response = FakeResponse(status_code, body, reason, read_error)
        return FakeSession(response=response, error=error)
    return make


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError("request fail")
