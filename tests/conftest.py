"""Shared fixtures for tests."""

import random
from datetime import datetime

import pytest

from railgraph.graph.diagram_graph import DiagramGraph
from railgraph.schema.loader import parse_application_from_string


FIXED_TIME = datetime(2024, 3, 5, 9, 7)


@pytest.fixture
def make_graph():
    """Return a factory for graphs with a seeded random source and fixed clock."""

    def _make(**kwargs) -> DiagramGraph:
        kwargs.setdefault("rng", random.Random(1234))
        kwargs.setdefault("clock", lambda: FIXED_TIME)
        return DiagramGraph(**kwargs)

    return _make


@pytest.fixture
def blog_yaml() -> str:
    """Return a small application with models, controllers and a state machine."""
    return """
name: Blog
migration_version: 20240301120000

models:
  User:
    attributes:
      - id: integer
      - email: string
      - name: string
      - created_at: datetime
    associations:
      - has_many: Post
      - has_one: Profile
      - has_many: Post
        name: drafts

  Post:
    parent: Publication
    attributes:
      - id: integer
      - title: string
      - body
    belongs_to: User
    has_and_belongs_to_many: Tag

  Tag:
    attributes:
      - name: string
    has_and_belongs_to_many: Post

  Profile:
    attributes:
      - bio: text

  Publication:
    abstract: true
    attributes:
      - published_at: datetime

classes:
  Slugger:
    parent: Object

modules:
  - Searchable

controllers:
  ApplicationController:
    parent: ActionController::Base
    protected: [current_user]
  PostsController:
    parent: ApplicationController
    public: [show, index, create]
    private: [set_post, post_params]

state_machines:
  Post:
    initial: draft
    states:
      - draft
      - review
      - name: published
        final: true
    events:
      - name: submit
        from: draft
        to: review
      - name: publish
        from: [draft, review]
        to: published
"""


@pytest.fixture
def blog_app(blog_yaml):
    """Return the parsed blog application."""
    return parse_application_from_string(blog_yaml)
