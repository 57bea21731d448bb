"""Category suite: one full create/read/update/delete lifecycle."""
from __future__ import annotations

from travel_catalog_contracts.assertions import CheckGroup, require_status
from travel_catalog_contracts.models import Category
from travel_catalog_contracts.scenarios.base import LifecycleStage, Scenario, ScenarioSession

CATEGORY_NAME = "Test Category"
UPDATED_CATEGORY_NAME = "Updated Test Category"


def category_lifecycle(session: ScenarioSession) -> None:
    categories = session.api.categories
    tracker = session.track("category")

    # Step 1: Create a new category
    created = categories.create(session.token, Category(name=CATEGORY_NAME).to_payload())
    session.publish_created("category", CATEGORY_NAME, created)
    require_status(created, 200, "create category")
    with CheckGroup("create category") as checks:
        body = checks.json_object(created)
        category_id = body.get("_id") if body is not None else None
        checks.not_blank(category_id, "Category ID should not be null or empty")
    category_id = str(category_id)
    tracker.advance(LifecycleStage.CREATED, category_id)
    session.context.publish("category", CATEGORY_NAME, category_id)

    # Step 2: Get all categories
    listing = categories.list()
    with CheckGroup("list categories") as checks:
        checks.status_is(listing, 200)
        checks.not_empty(listing)
        items = checks.json_array(listing)
        if items is not None:
            checks.greater_than(len(items), 0, "Expected at least one category in the response")
            checks.check(
                all(isinstance(item, dict) for item in items),
                "Expected every category to be a JSON object",
                expected="dict",
                actual=sorted({type(item).__name__ for item in items}),
            )
    tracker.advance(LifecycleStage.LISTED)

    # Step 3: Get category by ID
    fetched = categories.get(category_id)
    with CheckGroup("get category by id") as checks:
        checks.status_is(fetched, 200)
        checks.not_empty(fetched)
        body = checks.json_object(fetched)
        if body is not None:
            category = Category.from_dict(body)
            checks.equals(category.id, category_id, "Expected the category ID to match")
            checks.equals(category.name, CATEGORY_NAME, "Expected the category name to match")
    tracker.advance(LifecycleStage.FETCHED_BY_ID)

    # Step 4: Edit the category
    edited = categories.update(session.token, category_id, {"name": UPDATED_CATEGORY_NAME})
    require_status(edited, 200, "update category")
    tracker.advance(LifecycleStage.UPDATED)

    # Step 5: Verify the category is updated and kept its id
    refetched = categories.get(category_id)
    with CheckGroup("re-verify updated category") as checks:
        checks.status_is(refetched, 200)
        checks.not_empty(refetched)
        body = checks.json_object(refetched)
        if body is not None:
            category = Category.from_dict(body)
            checks.equals(category.name, UPDATED_CATEGORY_NAME, "Expected the updated category name to match")
            checks.equals(category.id, category_id, "Category ID should not change on update")
    tracker.advance(LifecycleStage.REVERIFIED)

    # Step 6: Delete the category
    deleted = categories.delete(session.token, category_id)
    require_status(deleted, 200, "delete category")
    tracker.advance(LifecycleStage.DELETED)
    session.context.withdraw("category", CATEGORY_NAME)

    # Step 7: Verify that the deleted category cannot be found
    gone = categories.get(category_id)
    with CheckGroup("confirm category absent") as checks:
        checks.is_absent(gone, "Deleted category should not be found")
    tracker.advance(LifecycleStage.CONFIRMED_ABSENT)


CATEGORY_SCENARIOS = (
    Scenario("category_lifecycle", category_lifecycle, "Create, read, update and delete a category"),
)
