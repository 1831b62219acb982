import json
import typing

import attr
import pytest

from entity_hydrator import Entity, Identity, Registry, children
from entity_hydrator.exceptions import MalformedPayloadError, TypeMismatchError
from entity_hydrator.merging import attribute_members, merge_scalars
from entity_hydrator.payload import parse


class Tag(Entity):
    id: Identity[int] = 0
    label: str = ""


class Post(Entity):
    id: Identity[int] = 0
    parent_id: int = 0
    title: str = ""
    subtitle: typing.Optional[str] = None
    published: bool = False
    tags: typing.List[Tag] = children()


@pytest.fixture()
def fields():
    registry = Registry()
    registry.register(Post)
    return registry.fields_of(Post)


def test_attribute_members_underscores_keys(fields):
    members = attribute_members(parse('{"parentId": 1, "title": "a", "sub_title": "b"}'), fields)

    assert set(members) == {"parent_id", "title"}


class Reply(Entity):
    id: Identity[int] = 0
    parentId: int = 0
    parent_id: int = 0


def test_exact_key_wins_over_underscored_form():
    registry = Registry()
    registry.register(Reply)
    reply = Reply()

    merge_scalars(reply, parse('{"parentId": 12, "parent_id": 23}'), registry.fields_of(Reply))

    assert reply == Reply(id=0, parentId=12, parent_id=23)


@pytest.mark.parametrize("payload", ['{"parentId": 1, "parent_id": 2}', '{"parent_id": 1, "ParentId": 2}'])
def test_keys_addressing_the_same_field(fields, payload):
    with pytest.raises(MalformedPayloadError) as error:
        merge_scalars(Post(), parse(payload), fields)

    assert "parent_id" in str(error.value)


def test_merges_present_scalars(fields):
    post = Post(id=7, parent_id=1, title="old", subtitle="kept")

    merge_scalars(post, parse('{"parentId": 12, "title": "title1", "published": true}'), fields)

    assert post == Post(id=7, parent_id=12, title="title1", subtitle="kept", published=True)


@pytest.mark.parametrize("absent", ["parent_id", "title", "subtitle", "published"])
def test_absent_key_leaves_field_untouched(fields, absent):
    post = Post(id=7, parent_id=1, title="old", subtitle="kept", published=True)
    before = attr.evolve(post)
    payload = {"parent_id": 2, "title": "new", "subtitle": "changed", "published": False}
    del payload[absent]
    document = parse(json.dumps(payload))

    merge_scalars(post, document, fields)

    assert getattr(post, absent) == getattr(before, absent)


def test_null_clears_nullable_field(fields):
    post = Post(subtitle="kept")

    merge_scalars(post, parse('{"subtitle": null}'), fields)

    assert post.subtitle is None


def test_ignores_unknown_keys_and_identity(fields):
    post = Post(id=7, title="old")

    merge_scalars(post, parse('{"id": 99, "unknown": 1, "title": "new"}'), fields)

    assert post.id == 7
    assert post.title == "new"


def test_does_not_touch_collections(fields):
    post = Post(tags=[Tag(1, "a")])

    merge_scalars(post, parse('{"tags": [{"id": 1, "label": "b"}]}'), fields)

    assert post.tags == [Tag(1, "a")]


def test_type_mismatch(fields):
    with pytest.raises(TypeMismatchError) as error:
        merge_scalars(Post(), parse('{"title": true}'), fields)

    assert error.value.field_name == "title"


def test_payload_must_be_object(fields):
    with pytest.raises(MalformedPayloadError):
        merge_scalars(Post(), parse("[]"), fields)
