"""
Generic resource bindings over the signed transport.

A ``ResourceClient`` is parameterized by a collection path and an item path.
Paths use positional ``{}`` placeholders that are filled, in order, with the
ids passed to each operation (parent ids first).
"""

from urllib.parse import quote

from .collection import build_template
from .exceptions import InvalidRequestSpec
from .results import ITEM, LIST, TEMPLATE, WRITE


def fill_path(template: str, ids) -> str:
    """Fill the ``{}`` placeholders of a path with URL-quoted ids."""
    expected = template.count('{}')
    if len(ids) != expected:
        raise InvalidRequestSpec(
            f"{template} takes {expected} id(s), got {len(ids)}"
        )
    return template.format(*[quote(str(i), safe='') for i in ids])


class ResourceClient:
    """get/list/create/update for one Collection+JSON resource."""

    def __init__(self, client, path: str, item_path: str = None):
        """
        Args:
            client: Client issuing the signed requests
            path: Collection path, e.g. ``/api/admin/users/{}/keys``
            item_path: Item path; defaults to ``path + '/{}'``
        """
        self._client = client
        self.path = path
        self.item_path = item_path or path + '/{}'

    def _request(self, method, template, ids, shape, body=None, params=None):
        path = fill_path(template, ids)
        return self._client.request(method, path, shape=shape, body=body, params=params)

    def get(self, *ids):
        """GET one item; data is the first item, normalized."""
        return self._request('GET', self.item_path, ids, ITEM)

    def list(self, *ids, params=None):
        """GET the collection; data is every item, normalized, in order."""
        return self._request('GET', self.path, ids, LIST, params=params)

    def create(self, *args):
        """POST a template to the collection: ``create(*parent_ids, template)``."""
        if not args:
            raise InvalidRequestSpec("create requires a template")
        *ids, template = args
        return self._request('POST', self.path, ids, WRITE, body=build_template(template))

    def update(self, *args):
        """PUT a template to an item: ``update(*ids, template)``."""
        if not args:
            raise InvalidRequestSpec("update requires a template")
        *ids, template = args
        return self._request('PUT', self.item_path, ids, WRITE, body=build_template(template))


class Opportunities(ResourceClient):

    def __init__(self, client):
        super().__init__(client, '/api/opportunities')

    def featured(self):
        """Opportunities featured for the calling API user."""
        return self._request('GET', '/api/opportunities/featured', (), LIST)


class Organizations(ResourceClient):

    def __init__(self, client):
        super().__init__(client, '/api/organizations')


class Signup(ResourceClient):
    """Signup template and submission for an opportunity."""

    def __init__(self, client):
        super().__init__(client, '/api/opportunities/{}/signup')

    def template(self, opportunity_id):
        """GET the signup template, returned as sent (not flattened)."""
        return self._request('GET', self.path, (opportunity_id,), TEMPLATE)

    def submit(self, opportunity_id, template, city=None):
        """
        POST a filled-in signup template.

        Args:
            opportunity_id: Opportunity to sign up for
            template: Template body, template object, entry list or mapping
            city: Franchise city, when signing up outside the user's own city
        """
        params = {'city': city} if city else None
        return self._request(
            'POST', self.path, (opportunity_id,), WRITE,
            body=build_template(template), params=params
        )


class UserKeys(ResourceClient):

    def __init__(self, client):
        super().__init__(client, '/api/admin/users/{}/keys')


class UserOrganizations(ResourceClient):
    """Organizations an API user may see, and its blacklist."""

    def __init__(self, client):
        super().__init__(client, '/api/admin/users/{}/organizations')

    def blacklist(self, user_id):
        return self._request('GET', self.path + '/blacklist', (user_id,), LIST)

    def add(self, user_id, organization_id):
        """Take an organization off the user's blacklist."""
        return self._request('PUT', self.item_path, (user_id, organization_id), WRITE)

    def remove(self, user_id, organization_id):
        """Blacklist an organization for the user."""
        return self._request('DELETE', self.item_path, (user_id, organization_id), WRITE)


class UserOpportunities(ResourceClient):
    """Opportunities featured for an API user."""

    def __init__(self, client):
        super().__init__(
            client,
            '/api/admin/users/{}/opportunities/featured',
            '/api/admin/users/{}/opportunities/featured/{}'
        )

    def featured(self, user_id):
        return self.list(user_id)

    def feature(self, user_id, opportunity_id):
        return self._request('PUT', self.item_path, (user_id, opportunity_id), WRITE)

    def unfeature(self, user_id, opportunity_id):
        return self._request('DELETE', self.item_path, (user_id, opportunity_id), WRITE)


class UserSignups(ResourceClient):

    def __init__(self, client):
        super().__init__(client, '/api/admin/users/{}/signups')


class Users(ResourceClient):
    """API users, with their keys, organizations, opportunities and signups."""

    def __init__(self, client):
        super().__init__(client, '/api/admin/users')
        self.keys = UserKeys(client)
        self.organizations = UserOrganizations(client)
        self.opportunities = UserOpportunities(client)
        self.signups = UserSignups(client)


class Admin:

    def __init__(self, client):
        self.users = Users(client)
