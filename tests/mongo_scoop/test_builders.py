"""Tests for the module-level condition shortcuts."""

import mongo_scoop
from mongo_scoop import builders
from mongo_scoop.cond import Cond


def test_shortcuts_return_fresh_conds():
    first = builders.equal("a", 1)
    second = builders.equal("b", 2)

    assert isinstance(first, Cond)
    assert first is not second
    assert first.to_bson() == {"a": 1}
    assert second.to_bson() == {"b": 2}


def test_new_cond_is_empty():
    assert builders.new_cond().to_bson() is None


def test_where_and_and_are_equivalent():
    assert builders.where("age >", 18).to_bson() == builders.and_("age >", 18).to_bson() == {"age": {"$gt": 18}}


def test_or_where():
    expected = {"$or": [{"a": 1}, {"b": 2}]}

    assert builders.or_where({"a": 1, "b": 2}).to_bson() == expected
    assert builders.or_([{"a": 1}, {"b": 2}]).to_bson() == expected


def test_in_scenario():
    assert builders.in_("role", "admin", "user").to_bson() == {"role": {"$in": ["admin", "user"]}}


def test_operator_shortcuts():
    assert builders.ne("a", 1).to_bson() == {"a": {"$ne": 1}}
    assert builders.gt("a", 1).to_bson() == {"a": {"$gt": 1}}
    assert builders.lt("a", 1).to_bson() == {"a": {"$lt": 1}}
    assert builders.gte("a", 1).to_bson() == {"a": {"$gte": 1}}
    assert builders.lte("a", 1).to_bson() == {"a": {"$lte": 1}}
    assert builders.not_in("a", [1, 2]).to_bson() == {"a": {"$nin": [1, 2]}}
    assert builders.between("a", 1, 2).to_bson() == {"a": {"$gte": 1, "$lte": 2}}
    assert builders.not_between("a", 1, 2).to_bson() == {"a": {"$not": {"$gte": 1, "$lte": 2}}}


def test_like_shortcuts():
    assert builders.like("n", "x").to_bson() == {"n": {"$regex": "x", "$options": "i"}}
    assert builders.left_like("n", "x").to_bson() == {"n": {"$regex": "x.*", "$options": "i"}}
    assert builders.right_like("n", "x").to_bson() == {"n": {"$regex": ".*x", "$options": "i"}}
    assert builders.not_like("n", "x").to_bson() == {"n": {"$not": {"$regex": "x", "$options": "i"}}}
    assert builders.not_left_like("n", "x").to_bson() == {"n": {"$not": {"$regex": "x.*", "$options": "i"}}}
    assert builders.not_right_like("n", "x").to_bson() == {"n": {"$not": {"$regex": ".*x", "$options": "i"}}}


def test_package_exports():
    assert mongo_scoop.where is builders.where
    assert mongo_scoop.Cond is Cond
