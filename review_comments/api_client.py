"""GitHub API client for REST list calls and GraphQL queries."""

import os
import logging
from typing import Any, Dict, Optional
import requests

GITHUB_API_URL = 'https://api.github.com'


class GitHubAPIClient:
    """Handles authenticated GitHub API requests.

    Requests are sent once; failures surface to the caller as exceptions.
    """

    def __init__(self, token: str = None, api_url: str = GITHUB_API_URL):
        """Initialize the GitHub API client.

        Args:
            token: GitHub personal access token for authentication
            api_url: Base URL of the REST API
        """
        # Use provided token or fall back to environment variable
        self.token = token or os.environ.get('GITHUB_TOKEN')
        self.api_url = api_url.rstrip('/')
        self.session = requests.Session()
        self.session.headers.update({'Accept': 'application/vnd.github.v3+json'})

        if self.token:
            self.session.headers.update({'Authorization': f'token {self.token}'})
            logging.info("Initialized GitHub API client with token")
        else:
            logging.warning("No GitHub token provided. GraphQL queries require authentication.")
            logging.warning("Set GITHUB_TOKEN environment variable or pass token as argument.")

    def get_json(self, path: str, params: Optional[Dict] = None) -> Any:
        """Make a single GET request to the REST API and decode the JSON body.

        Args:
            path: Endpoint path relative to the API root, e.g. ``/repos/o/r/pulls``
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            requests.exceptions.HTTPError: If the response status is not successful
        """
        url = f"{self.api_url}/{path.lstrip('/')}"
        logging.debug(f"GET {url} params={params}")
        response = self.session.get(url, params=params)

        if response.status_code == 403:
            logging.error(f"Request forbidden or rate limit exceeded: {response.text}")

        response.raise_for_status()
        return response.json()

    def post_graphql(self, query: str, variables: Dict = None) -> Dict:
        """Make a GraphQL query to the GitHub API.

        Args:
            query: GraphQL query string
            variables: Optional query variables

        Returns:
            The ``data`` member of the JSON response

        Raises:
            requests.exceptions.HTTPError: If the HTTP request fails
            GraphQLError: If the response carries GraphQL errors
        """
        url = f"{self.api_url}/graphql"
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        response = self.session.post(url, json=payload)

        if response.status_code == 403:
            logging.error(f"Request forbidden or rate limit exceeded: {response.text}")

        response.raise_for_status()
        result = response.json()

        # Check for GraphQL errors
        if result.get("errors"):
            logging.error(f"GraphQL errors: {result['errors']}")
            raise GraphQLError(result["errors"])

        return result.get("data") or {}


class GraphQLError(Exception):
    """Raised when GitHub answers a GraphQL query with an ``errors`` list."""

    def __init__(self, errors):
        self.errors = errors
        messages = '; '.join(str(e.get('message', e)) if isinstance(e, dict) else str(e) for e in errors)
        super().__init__(f"GraphQL query failed: {messages}")
