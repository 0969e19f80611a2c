"""Tests for augmented diff (action) decoding."""
from datetime import datetime, timezone

import pytest

from overpass_graph.exceptions import DecodeError
from overpass_graph.models import Node, Point
from overpass_graph.xml_parser import XmlResponseParser


def parse(body):
    return XmlResponseParser.parse(body)


class TestDiffShape:
    """Tests for the diff-aware result."""

    def test_count_is_number_of_actions(self, diff_xml):
        result = parse(diff_xml)

        assert result.count == 4
        assert result.is_diff

    def test_timestamp(self, diff_xml):
        result = parse(diff_xml)

        assert result.timestamp == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_create(self, diff_xml):
        result = parse(diff_xml)
        node = result.nodes[10]

        assert result.create.nodes == {10: node}
        assert result.create.nodes[10] is node
        assert node.tags == {"shop": "bakery"}
        assert node.user == "alice"
        assert node.timestamp == datetime(2024, 4, 1, tzinfo=timezone.utc)
        assert result.create.ways == {}

    def test_modify_node_old_and_new_are_distinct(self, diff_xml):
        result = parse(diff_xml)
        entry = result.modify.nodes[20]

        assert entry["old"] is not entry["new"]
        assert entry["old"] == Node(id=20, lat=3.0, lon=4.0, version=1, changeset=400, user="bob", uid=12)
        assert entry["new"] == Node(id=20, lat=3.5, lon=4.5, version=2, changeset=501, user="alice", uid=11,
                                    tags={"name": "Moved"})
        assert entry["old"] is result.old_nodes[20]
        assert entry["new"] is result.nodes[20]

    def test_modify_way(self, diff_xml):
        result = parse(diff_xml)
        entry = result.modify.ways[200]

        assert entry["old"].version == 1
        assert entry["old"].tags is None
        assert entry["old"].geometry == [Point(1.0, 2.0), Point(3.0, 4.0)]
        assert entry["new"].version == 2
        assert entry["new"].geometry == [Point(1.0, 2.0), Point(3.5, 4.5)]
        assert entry["new"] is result.ways[200]
        assert entry["old"] is result.old_ways[200]

    def test_way_references_resolve_to_current_nodes(self, diff_xml):
        result = parse(diff_xml)

        assert result.ways[200].nodes[1] is result.nodes[20]
        assert result.old_ways[200].nodes[1] is result.nodes[20]
        assert result.ways[200].nodes[0] is result.create.nodes[10]

    def test_delete_copies_tombstone_visibility(self, diff_xml):
        result = parse(diff_xml)
        deleted = result.delete.nodes[30]

        assert deleted is result.old_nodes[30]
        assert deleted.visible is False
        assert deleted.version == 4
        assert deleted.tags == {"amenity": "bench"}
        assert 30 not in result.nodes

    def test_delete_without_new_keeps_visibility_unset(self):
        result = parse(b'''<osm><action type="delete">
          <old><way id="3" version="2"><nd ref="1"/></way></old>
        </action></osm>''')

        assert result.delete.ways[3].visible is None
        assert result.delete.ways[3].nodes[0] is result.nodes[1]

    def test_summaries_created_only_when_used(self):
        result = parse(b'''<osm><action type="create"><node id="1" lat="0" lon="0"/></action></osm>''')

        assert result.create is not None
        assert result.modify is None
        assert result.delete is None
        assert result.old_nodes == {}

    def test_same_id_in_old_and_current_state(self, diff_xml):
        result = parse(diff_xml)

        assert 20 in result.nodes and 20 in result.old_nodes
        assert result.nodes[20] is not result.old_nodes[20]


class TestModifyRelations:
    """Tests for relation revisions in modify actions."""

    def test_relation_old_and_new(self):
        result = parse(b'''<osm><action type="modify">
          <old><relation id="5" version="1"><member type="node" ref="1" role=""/></relation></old>
          <new><relation id="5" version="2"><member type="node" ref="1" role="stop"/></relation></new>
        </action></osm>''')
        entry = result.modify.relations[5]

        assert entry["old"].version == 1
        assert entry["new"].version == 2
        assert entry["new"].members[0].role == "stop"
        assert entry["new"].members[0].node is entry["old"].members[0].node

    def test_new_relation_filed_under_old_id(self):
        result = parse(b'''<osm><action type="modify">
          <old><relation id="5" version="1"/></old>
          <new><relation id="6" version="2"/></new>
        </action></osm>''')

        assert set(result.modify.relations) == {5}
        assert result.modify.relations[5]["new"] is result.relations[6]
        assert result.modify.relations[5]["old"] is result.old_relations[5]


class TestDiffErrors:
    """Tests for structurally inconsistent diffs."""

    def test_modify_new_without_old(self):
        with pytest.raises(DecodeError):
            parse(b'''<osm><action type="modify">
              <old/>
              <new><node id="1" lat="0" lon="0"/></new>
            </action></osm>''')

    def test_modify_new_relation_without_old(self):
        with pytest.raises(DecodeError):
            parse(b'''<osm><action type="modify">
              <new><relation id="1"/></new>
            </action></osm>''')

    def test_delete_tombstone_without_old(self):
        with pytest.raises(DecodeError):
            parse(b'''<osm><action type="delete">
              <new><node id="1" visible="false"/></new>
            </action></osm>''')

    def test_unknown_action_type(self):
        with pytest.raises(DecodeError):
            parse(b'<osm><action type="rename"/></osm>')
