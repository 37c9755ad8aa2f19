"""Tests for catalog queries and listing pages."""

from tutorialhub.core.catalog import (
    CategoryPage,
    build_category_page,
    build_home_page,
    featured_tutorials,
    filter_by_category,
    filter_by_difficulty,
    related_tutorials,
    search_tutorials,
    sort_by_date,
)
from tutorialhub.core.content import Category, ContentStore
from tutorialhub.core.resolver import NotFound

from conftest import TutorialFactory


class TestQueries:
    """Tests for filter/search/sort helpers."""

    def test__filter_by_category__case_insensitive(self, store: ContentStore) -> None:
        assert [t.slug for t in filter_by_category(store.tutorials(), "JAVA")] == ["java-basics"]

    def test__filter_by_difficulty__case_insensitive(self, store: ContentStore) -> None:
        assert [t.slug for t in filter_by_difficulty(store.tutorials(), "advanced")] == ["b"]

    def test__search__matches_title_description_and_tags(self, make_tutorial: TutorialFactory) -> None:
        """Search title, description and tags case-insensitively."""
        tutorials = [
            make_tutorial("a", title="BigQuery Basics"),
            make_tutorial("b", description="Using bigquery with Python"),
            make_tutorial("c", tags=("BigQuery",)),
            make_tutorial("d", title="Cloud Run"),
        ]

        assert [t.slug for t in search_tutorials(tutorials, "bigquery")] == ["a", "b", "c"]

    def test__sort_by_date__newest_first(self, make_tutorial: TutorialFactory) -> None:
        tutorials = [
            make_tutorial("old", published_at="2024-01-01"),
            make_tutorial("new", published_at="2024-12-01"),
            make_tutorial("mid", published_at="2024-06-01"),
        ]

        assert [t.slug for t in sort_by_date(tutorials)] == ["new", "mid", "old"]

    def test__featured(self, make_tutorial: TutorialFactory) -> None:
        tutorials = [make_tutorial("a", featured=True), make_tutorial("b")]

        assert [t.slug for t in featured_tutorials(tutorials)] == ["a"]

    def test__related__orders_by_shared_tags_and_limits(self, make_tutorial: TutorialFactory) -> None:
        """Most shared tags first, current tutorial excluded, limited."""
        current = make_tutorial("cur", tags=("a", "b", "c"))
        tutorials = [
            current,
            make_tutorial("one", tags=("a",)),
            make_tutorial("three", tags=("a", "b", "c")),
            make_tutorial("two", tags=("b", "c")),
            make_tutorial("none", tags=("z",)),
            make_tutorial("one-again", tags=("c",)),
        ]

        related = related_tutorials(tutorials, current, limit=3)

        assert [t.slug for t in related] == ["three", "two", "one"]


class TestBuildCategoryPage:
    """Tests for build_category_page()."""

    def test__first_page(self, make_tutorial: TutorialFactory) -> None:
        """Paginate a category listing."""
        store = ContentStore([make_tutorial(f"t{i}") for i in range(5)])

        page = build_category_page(store, "gcp", page=1, per_page=2)

        assert isinstance(page, CategoryPage)
        assert [t.slug for t in page.tutorials] == ["t0", "t1"]
        assert page.total_tutorials == 5
        assert page.total_pages == 3
        assert (page.first_index, page.last_index) == (1, 2)

    def test__last_page__partial(self, make_tutorial: TutorialFactory) -> None:
        store = ContentStore([make_tutorial(f"t{i}") for i in range(5)])

        page = build_category_page(store, "gcp", page=3, per_page=2)

        assert isinstance(page, CategoryPage)
        assert [t.slug for t in page.tutorials] == ["t4"]
        assert (page.first_index, page.last_index) == (5, 5)

    def test__out_of_range_page__not_found(self, store: ContentStore) -> None:
        assert isinstance(build_category_page(store, "gcp", page=2), NotFound)
        assert isinstance(build_category_page(store, "gcp", page=0), NotFound)

    def test__unknown_category__not_found(self, store: ContentStore) -> None:
        assert isinstance(build_category_page(store, "python"), NotFound)

    def test__declared_empty_category__single_empty_page(self) -> None:
        """A declared category without tutorials lists nothing."""
        store = ContentStore([], [Category(slug="react", name="React")])  # type: ignore[arg-type]

        page = build_category_page(store, "react")

        assert isinstance(page, CategoryPage)
        assert page.tutorials == []
        assert (page.total_pages, page.first_index, page.last_index) == (1, 0, 0)

    def test__to_dict__omits_content(self, store: ContentStore) -> None:
        page = build_category_page(store, "gcp")
        assert isinstance(page, CategoryPage)

        data = page.to_dict()

        assert data["totalTutorials"] == 3
        assert "content" not in data["tutorials"][0]  # type: ignore[index]
        assert data["pagination"] == {  # type: ignore[comparison-overlap]
            "page": 1,
            "perPage": 12,
            "totalPages": 1,
            "firstIndex": 1,
            "lastIndex": 3,
        }


class TestBuildHomePage:
    """Tests for build_home_page()."""

    def test__featured_and_category_counts(self, make_tutorial: TutorialFactory) -> None:
        """List featured tutorials newest first and categories with counts."""
        store = ContentStore(
            [
                make_tutorial("a", featured=True, published_at="2024-01-01"),
                make_tutorial("b", featured=True, published_at="2024-05-01"),
                make_tutorial("c", category="java"),
            ],
            [Category(slug="gcp", name="GCP"), Category(slug="react", name="React")],  # type: ignore[arg-type]
        )

        data = build_home_page(store).to_dict()

        assert [t["slug"] for t in data["featuredTutorials"]] == ["b", "a"]  # type: ignore[index, union-attr]
        assert [(c["slug"], c["tutorialCount"]) for c in data["categories"]] == [  # type: ignore[index, union-attr]
            ("gcp", 2),
            ("react", 0),
            ("java", 1),
        ]
