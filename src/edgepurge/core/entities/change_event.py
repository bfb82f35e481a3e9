"""Content change events and entity snapshots."""

from dataclasses import dataclass
from enum import Enum

PUBLISHED = "publish"


class EntityType(Enum):
    """Kind of entity a change event refers to."""

    POST = "post"
    TERM = "term"


class TermState(Enum):
    """Lifecycle states reported for taxonomy terms."""

    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"


@dataclass(frozen=True)
class Post:
    """Snapshot of a post-like content entity.

    Attributes:
        id: Entity identifier in the content-management system.
        post_type: Content type name (``post``, ``page``, custom types).
        author_id: Author identifier, or None when the type has no author.
        is_revision: True for stored revisions of another post.
        is_autosave: True for editor autosaves.
    """

    id: int
    post_type: str = "post"
    author_id: int | None = None
    is_revision: bool = False
    is_autosave: bool = False


@dataclass(frozen=True)
class Term:
    """Snapshot of a taxonomy term.

    Attributes:
        id: Term identifier.
        taxonomy: Taxonomy name (``category``, ``post_tag``, ...).
        slug: URL slug of the term.
        parent_id: Parent term identifier for hierarchical taxonomies.
        url: Archive link captured when the event was raised. Used when the
            term can no longer be resolved, e.g. after deletion.
    """

    id: int
    taxonomy: str
    slug: str = ""
    parent_id: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class ChangeEvent:
    """A content state transition raised by the content-management system.

    For posts, ``previous_state`` and ``new_state`` are status strings such as
    ``publish`` or ``draft``. For terms they are ``TermState`` values, with
    ``previous_state`` left as None unless the caller knows it.
    """

    entity_type: EntityType
    entity: Post | Term
    previous_state: str | TermState | None = None
    new_state: str | TermState | None = None

    @classmethod
    def for_post(
        cls,
        post: Post,
        previous_state: str | None,
        new_state: str | None,
    ) -> "ChangeEvent":
        """Create a post status transition event."""
        return cls(
            entity_type=EntityType.POST,
            entity=post,
            previous_state=previous_state,
            new_state=new_state,
        )

    @classmethod
    def for_term(
        cls,
        term: Term,
        state: TermState,
        previous_state: TermState | None = None,
    ) -> "ChangeEvent":
        """Create a term lifecycle event.

        The previous state is only recorded when the caller knows it.
        """
        return cls(
            entity_type=EntityType.TERM,
            entity=term,
            previous_state=previous_state,
            new_state=state,
        )

    @property
    def touches_published(self) -> bool:
        """Check if the transition starts or ends in the published state."""
        return PUBLISHED in (self.previous_state, self.new_state)
