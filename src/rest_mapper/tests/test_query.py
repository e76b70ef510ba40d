import pytest

from ..collection import Collection
from ..exceptions import (
    InvalidQueryArgumentsError,
    ModelNotFoundError,
    RelationNotFoundError,
    UnknownOperatorError,
)
from .testing import Image, Post, User, json_response


@pytest.fixture
def target():
    from ..query import Query

    return Query


class TestWhere:
    def test_two_arguments(self, target, token):
        query = target(User(token)).where("name", "bob")
        assert [(c.field, c.operator, c.value) for c in query.conditions] == [("name", "=", "bob")]

    def test_three_arguments(self, target, token):
        query = target(User(token)).where("age", ">=", 18).where("name", "LIKE", "bo%")
        assert [(c.field, c.operator, c.value) for c in query.conditions] == [
            ("age", ">=", 18),
            ("name", "like", "bo%"),
        ]

    @pytest.mark.parametrize("arguments", [(), ("name",), ("a", "=", 1, 2)])
    def test_invalid_arity(self, target, token, arguments):
        with pytest.raises(InvalidQueryArgumentsError) as e:
            target(User(token)).where(*arguments)
        assert e.value.arguments == arguments

    def test_unknown_operator(self, target, token):
        with pytest.raises(UnknownOperatorError) as e:
            target(User(token)).where("age", "~", 18)
        assert e.value.operator == "~"

    def test_in(self, target, token):
        query = target(User(token)).where_in("id", [1, 2, 3]).where_not_in("role", ["a", "b"])
        assert [(c.field, c.operator, c.value) for c in query.conditions] == [
            ("id", "in", "1,2,3"),
            ("role", "not-in", "a,b"),
        ]

    def test_null(self, target, token):
        query = target(User(token)).where_null("deletedAt").where_not_null("email")
        assert [(c.field, c.operator, c.value) for c in query.conditions] == [
            ("deletedAt", "=", None),
            ("email", "!=", None),
        ]


class TestClauses:
    def test_primary_key_is_pulled_out(self, target, token):
        clauses = target(User(token)).where("name", "bob").where("id", 5).get_clauses()
        assert clauses.id == 5
        assert [c.field for c in clauses.where] == ["name"]

    def test_only_the_first_primary_key_condition(self, target, token):
        clauses = target(User(token)).where("id", 5).where("id", 6).get_clauses()
        assert clauses.id == 5
        assert [(c.field, c.value) for c in clauses.where] == [("id", 6)]

    def test_primary_key_with_other_operator_stays(self, target, token):
        clauses = target(User(token)).where("id", ">", 5).get_clauses()
        assert clauses.id is None
        assert [(c.field, c.operator) for c in clauses.where] == [("id", ">")]

    def test_get_clauses_leaves_query_intact(self, target, token):
        query = target(User(token)).where("id", 5)
        query.get_clauses()
        assert len(query.conditions) == 1

    def test_limit_and_offset(self, target, token):
        clauses = target(User(token)).get_clauses()
        assert clauses.limit is None
        assert clauses.offset is None

        clauses = target(User(token)).take(0).offset(0).get_clauses()
        assert clauses.limit is None
        assert clauses.offset is None

        clauses = target(User(token)).limit(10).offset(20).get_clauses()
        assert clauses.limit == 10
        assert clauses.offset == 20

    def test_sort_and_fields(self, target, token):
        clauses = (
            target(User(token))
            .order_by("name", "desc")
            .order_by("id")
            .select("id", "name")
            .select(["name", "email"])
            .get_clauses()
        )
        assert clauses.sort == {"name": "desc", "id": "asc"}
        assert clauses.fields == ("id", "name", "email")


class TestWith:
    def test_declared_names(self, target, token):
        clauses = target(Post(token)).with_("author", ["comments"]).get_clauses()
        assert clauses.expand == ("user", "comments")

    def test_dotted_path(self, target, token):
        clauses = target(Post(token)).with_("author.company", "author.blog_posts").get_clauses()
        assert clauses.expand == ("user.company", "user.blogPosts")

    def test_duplicates(self, target, token):
        clauses = target(Post(token)).with_("author").with_("author").get_clauses()
        assert clauses.expand == ("user",)

    def test_unknown_relation(self, target, token):
        with pytest.raises(RelationNotFoundError) as e:
            target(Post(token)).with_("author.nope")
        assert e.value.name == "nope"


class TestExecution:
    def test_find(self, target, token, transport):
        transport.queue(json_response({"id": 5, "name": "bob"}))
        result = target(User(token)).find(5)
        assert isinstance(result, User)
        assert result.get_attributes() == {"id": 5, "name": "bob"}
        assert transport.last_call.method == "GET"
        assert transport.last_call.url == "https://api.example.com/users/5"
        assert transport.last_call.params == {}

    def test_find_not_found(self, target, token, transport):
        transport.queue(json_response({"errorDescription": "no such user"}, 404))
        assert target(User(token)).find(5) is None

    def test_get_collection(self, target, token, transport):
        transport.queue(json_response([{"id": 1}, {"id": 2}]))
        result = target(User(token)).where("active", True).get()
        assert isinstance(result, Collection)
        assert result.keys() == [1, 2]
        assert transport.last_call.url == "https://api.example.com/users"
        assert transport.last_call.params == {"active": "true"}

    def test_get_empty_listing(self, target, token, transport):
        transport.queue(json_response([]))
        result = target(User(token)).get()
        assert isinstance(result, Collection)
        assert len(result) == 0

    def test_first(self, target, token, transport):
        transport.queue(json_response([{"id": 3}, {"id": 4}]))
        result = target(User(token)).first()
        assert isinstance(result, User)
        assert result.get_key() == 3

    def test_first_of_single_result(self, target, token, transport):
        transport.queue(json_response({"id": 3}))
        result = target(User(token)).where("id", 3).first()
        assert result.get_key() == 3

    def test_first_or_fail(self, target, token, transport):
        transport.queue(json_response([]))
        with pytest.raises(ModelNotFoundError):
            target(User(token)).first_or_fail()

    def test_first_or_fail_not_found(self, target, token, transport):
        transport.queue(json_response({}, 404))
        user = User(token)
        with pytest.raises(ModelNotFoundError) as e:
            target(user).where("id", 7).first_or_fail()
        assert e.value.model is user
        assert transport.last_call.url == "https://api.example.com/users/7"

    def test_first_not_found(self, target, token, transport):
        transport.queue(json_response({}, 404))
        assert target(User(token)).where("id", 7).first() is None

    def test_eager_morph_to(self, target, token, transport):
        transport.queue(
            json_response(
                {
                    "id": 1,
                    "imageable_type": "Post",
                    "imageable_id": 10,
                    "imageable": {"id": 10, "title": "x"},
                }
            )
        )
        image = target(Image(token)).with_("imageable").find(1)
        assert transport.last_call.url == "https://api.example.com/images/1"
        assert transport.last_call.params == {"expand": "imageable"}
        assert image.get_attribute("imageable_type") == "Post"
        post = image.get_relation("imageable")
        assert isinstance(post, Post)
        assert post.get_attribute("title") == "x"
        assert len(transport.calls) == 1
