import pytest

from ..exceptions import (
    InvalidModelError,
    ModelError,
    ModelNotFoundError,
    TransportError,
)
from ..models import Model
from .testing import Account, FakeResponse, FakeTransport, Profile, User, json_response


@pytest.fixture
def target():
    from ..request import Request

    return Request


class Versioned(Model):
    endpoint = "/widgets/"
    prefix = "v2"


class TestBuildURL:
    def test_collection(self, target, token, transport):
        assert target(User(token)).build_url() == "https://api.example.com/users"

    def test_resource(self, target, token, transport):
        assert target(User(token)).build_url(5) == "https://api.example.com/users/5"

    def test_key_is_quoted(self, target, token, transport):
        assert target(User(token)).build_url("a/b c") == "https://api.example.com/users/a%2Fb%20c"

    def test_scopes(self, target, token, transport):
        user = User(token).scope("accounts", 7).scope("teams")
        assert target(user).build_url(3) == "https://api.example.com/accounts/7/teams/users/3"

    def test_prefix_and_trailing_slashes(self, target, token):
        request = target(
            Versioned(token),
            transport=FakeTransport(),
            base_url="https://api.example.com/",
        )
        assert request.build_url(1) == "https://api.example.com/v2/widgets/1"

    def test_without_base_url(self, target, token):
        request = target(Versioned(token), transport=FakeTransport(), base_url="")
        assert request.build_url() == "/v2/widgets"

    def test_nested(self, target, token, transport):
        profile = Profile(token).nest_under(Account(token, {"id": 7}))
        assert target(profile).build_url() == "https://api.example.com/accounts/7/profile"


class TestGet:
    def test_headers(self, target, token, transport):
        user = User(token)
        target(user).get(user.new_query())
        assert transport.last_call.headers == {
            "Authorization": "Bearer secret",
            "Accept": "application/json",
        }

    def test_params(self, target, token, transport):
        transport.queue(json_response([]))
        user = User(token)
        query = (
            user.new_query()
            .where("active", True)
            .where_null("deletedAt")
            .order_by("name", "desc")
            .order_by("id")
            .select("id", "name")
            .with_("posts")
            .limit(10)
            .offset(20)
        )
        assert target(user).get(query) == []
        assert transport.last_call.url == "https://api.example.com/users"
        assert transport.last_call.params == {
            "expand": "posts",
            "sort": "-name,id",
            "fields": "id,name",
            "limit": 10,
            "offset": 20,
            "active": "true",
            "deletedAt": "null",
        }

    def test_empty_lookup(self, target, token, transport):
        user = User(token)
        assert target(user).get(user.new_query().where("id", 1)) is None

    def test_empty_singleton(self, target, token, transport):
        profile = Profile(token)
        assert target(profile).get(profile.new_query()) is None

    def test_singleton_not_found(self, target, token, transport):
        transport.queue(json_response({}, 404))
        profile = Profile(token)
        assert target(profile).get(profile.new_query()) is None

    def test_listing_not_found(self, target, token, transport):
        transport.queue(json_response({"errorDescription": "no such thing"}, 404))
        user = User(token)
        with pytest.raises(ModelNotFoundError) as e:
            target(user).get(user.new_query())
        assert e.value.message == "no such thing"
        assert e.value.code == 404

    def test_invalid(self, target, token, transport):
        transport.queue(
            json_response(
                {"errorDescription": "bad filter", "errorDetails": {"age": "not a number"}},
                400,
            )
        )
        user = User(token)
        with pytest.raises(InvalidModelError) as e:
            target(user).get(user.new_query().where("age", "x"))
        assert e.value.message == "bad filter"
        assert e.value.errors == {"age": "not a number"}
        assert e.value.model is user

    def test_server_error(self, target, token, transport):
        transport.queue(FakeResponse(503, b"unavailable"))
        user = User(token)
        with pytest.raises(ModelError) as e:
            target(user).get(user.new_query().where("id", 1))
        assert type(e.value) is ModelError
        assert e.value.code == 503
        assert isinstance(e.value.__cause__, TransportError)

    def test_connection_failure(self, target, token, transport):
        transport.queue(TransportError("connection refused"))
        user = User(token)
        with pytest.raises(ModelError) as e:
            target(user).get(user.new_query().where("id", 1))
        assert e.value.message == "connection refused"
        assert e.value.code == 0


class TestWrite:
    def test_post(self, target, token, transport):
        transport.queue(json_response({"id": 1, "name": "bob"}, 201))
        user = User(token, {"name": "bob"})
        assert target(user).post() == {"id": 1, "name": "bob"}
        assert transport.last_call.method == "POST"
        assert transport.last_call.url == "https://api.example.com/users"
        assert transport.last_call.json == {"name": "bob"}

    def test_put(self, target, token, transport):
        user = User(token, {"id": 1, "name": "bob"})
        assert target(user).put() is None
        assert transport.last_call.method == "PUT"
        assert transport.last_call.url == "https://api.example.com/users/1"
        assert transport.last_call.json == {"id": 1, "name": "bob"}

    def test_patch(self, target, token, transport):
        user = User(token, {"id": 1})
        target(user).patch()
        assert transport.last_call.method == "PATCH"
        assert transport.last_call.url == "https://api.example.com/users/1"

    def test_delete(self, target, token, transport):
        assert target(User(token, {"id": 1})).delete() is True
        assert transport.last_call.method == "DELETE"
        assert transport.last_call.url == "https://api.example.com/users/1"
        assert transport.last_call.json is None

    def test_delete_not_found(self, target, token, transport):
        transport.queue(json_response({}, 404))
        with pytest.raises(ModelNotFoundError) as e:
            target(User(token, {"id": 1})).delete()
        assert e.value.message == 'no "user" found'
