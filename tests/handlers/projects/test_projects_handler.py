import json
from http import HTTPStatus
from typing import Any, cast
from unittest.mock import patch

import pytest
from PIL import Image

from core.models.collections import ProjectCollection
from handlers.projects.handler import create_item, delete_item, get_item, list_items, update_item

PROJECT_FIELDS = {
    "nationalId": "199012345678",
    "name": "Nimal Perera",
    "project": "Rainwater tank",
    "gsDivision": "Kotte East",
    "address": "12 Temple Road",
    "description": "Tank installed",
    "lat": "6.89",
    "lng": "79.91",
}


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    return cast(dict[str, Any], json.loads(resp["body"]))


def create_project(multipart_event, lambda_context, tab: str = "cesp", files=None, **overrides):
    event = multipart_event(
        "POST",
        f"/api/{tab}",
        path_params={"tab": tab},
        fields={**PROJECT_FIELDS, **overrides},
        files=files,
    )
    return create_item(event, lambda_context)


class TestProjectCreate:
    def test_create_with_photos(
        self, project_tables, upload_dir, multipart_event, lambda_context, sample_png_binary
    ) -> None:
        resp = create_project(
            multipart_event,
            lambda_context,
            files={"beforePhoto": ("before.png", sample_png_binary, "image/png")},
        )

        body = parse_body(resp)
        assert resp["statusCode"] == HTTPStatus.CREATED
        assert body["nationalId"] == "199012345678"
        assert body["lat"] == pytest.approx(6.89)
        assert body["beforePhoto"].startswith("data:image/jpeg;base64,")
        assert body["afterPhoto"] is None
        assert list(upload_dir.iterdir()) == []
        assert len(project_tables[ProjectCollection.CESP].scan()["Items"]) == 1

    def test_create_without_photos(self, project_tables, upload_dir, multipart_event, lambda_context) -> None:
        resp = create_project(multipart_event, lambda_context, tab="in")

        assert resp["statusCode"] == HTTPStatus.CREATED
        assert len(project_tables[ProjectCollection.IN].scan()["Items"]) == 1

    def test_latitude_out_of_range(self, project_tables, upload_dir, multipart_event, lambda_context) -> None:
        resp = create_project(multipart_event, lambda_context, lat="95")

        body = parse_body(resp)
        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body["error"] == "VALIDATION_FAILED"
        assert body["details"]["errors"][0]["field"] == "lat"
        assert project_tables[ProjectCollection.CESP].scan()["Items"] == []

    def test_project_uploads_are_not_type_filtered(
        self, project_tables, upload_dir, multipart_event, lambda_context, sample_png_binary
    ) -> None:
        resp = create_project(
            multipart_event,
            lambda_context,
            files={"afterPhoto": ("after.dat", sample_png_binary, "application/octet-stream")},
        )

        assert resp["statusCode"] == HTTPStatus.CREATED
        assert parse_body(resp)["afterPhoto"].startswith("data:image/jpeg;base64,")

    def test_long_filename_extension(
        self, project_tables, upload_dir, multipart_event, lambda_context, sample_png_binary
    ) -> None:
        resp = create_project(
            multipart_event,
            lambda_context,
            files={"beforePhoto": ("photo." + "a" * 300, sample_png_binary, "image/png")},
        )

        assert resp["statusCode"] == HTTPStatus.CREATED
        assert parse_body(resp)["beforePhoto"].startswith("data:image/jpeg;base64,")
        assert list(upload_dir.iterdir()) == []

    def test_tall_sliver_photo_is_rejected(
        self, project_tables, upload_dir, multipart_event, lambda_context, tmp_path
    ) -> None:
        sliver = tmp_path / "sliver.png"
        Image.new("L", (1, 300)).save(sliver)

        resp = create_project(
            multipart_event,
            lambda_context,
            files={"afterPhoto": ("sliver.png", sliver.read_bytes(), "image/png")},
        )

        assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
        assert parse_body(resp)["error"] == "TRANSCODE_FAILED"
        assert project_tables[ProjectCollection.CESP].scan()["Items"] == []
        assert list(upload_dir.iterdir()) == []

    def test_unexpected_file_field(
        self, project_tables, upload_dir, multipart_event, lambda_context, sample_png_binary
    ) -> None:
        resp = create_project(
            multipart_event,
            lambda_context,
            files={"image": ("a.png", sample_png_binary, "image/png")},
        )

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert parse_body(resp)["error"] == "UNEXPECTED_FILE_FIELD"

    def test_collections_are_isolated(
        self, project_tables, upload_dir, multipart_event, api_event, lambda_context
    ) -> None:
        created = parse_body(create_project(multipart_event, lambda_context, tab="cp"))

        resp = get_item(
            api_event("GET", f"/api/led/{created['id']}", path_params={"tab": "led", "id": created["id"]}),
            lambda_context,
        )

        assert resp["statusCode"] == HTTPStatus.NOT_FOUND


class TestProjectReadUpdateDelete:
    def test_list_items(self, project_tables, upload_dir, multipart_event, api_event, lambda_context) -> None:
        create_project(multipart_event, lambda_context, tab="led", name="First")
        create_project(multipart_event, lambda_context, tab="led", name="Second")
        create_project(multipart_event, lambda_context, tab="cp", name="Elsewhere")

        resp = list_items(api_event("GET", "/api/led", path_params={"tab": "led"}), lambda_context)

        body = parse_body(resp)
        assert resp["statusCode"] == HTTPStatus.OK
        assert body["tab"] == "led"
        assert body["count"] == 2
        assert [item["name"] for item in body["items"]] == ["First", "Second"]

    def test_update_keeps_untouched_photo(
        self, project_tables, upload_dir, multipart_event, lambda_context, sample_png_binary, sample_jpeg_binary
    ) -> None:
        created = parse_body(
            create_project(
                multipart_event,
                lambda_context,
                files={
                    "beforePhoto": ("before.png", sample_png_binary, "image/png"),
                    "afterPhoto": ("after.png", sample_png_binary, "image/png"),
                },
            )
        )

        event = multipart_event(
            "PUT",
            f"/api/cesp/{created['id']}",
            path_params={"tab": "cesp", "id": created["id"]},
            fields={"address": "New road", "name": ""},
            files={"afterPhoto": ("after.jpg", sample_jpeg_binary, "image/jpeg")},
        )
        resp = update_item(event, lambda_context)

        updated = parse_body(resp)
        assert resp["statusCode"] == HTTPStatus.OK
        assert updated["address"] == "New road"
        assert updated["name"] == created["name"]
        assert updated["beforePhoto"] == created["beforePhoto"]
        assert updated["afterPhoto"].startswith("data:image/jpeg;base64,")
        assert list(upload_dir.iterdir()) == []

    def test_update_rejects_invalid_longitude(
        self, project_tables, upload_dir, multipart_event, lambda_context
    ) -> None:
        created = parse_body(create_project(multipart_event, lambda_context))

        event = multipart_event(
            "PUT",
            f"/api/cesp/{created['id']}",
            path_params={"tab": "cesp", "id": created["id"]},
            fields={"lng": "181"},
        )
        resp = update_item(event, lambda_context)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST

    def test_delete(self, project_tables, upload_dir, multipart_event, api_event, lambda_context) -> None:
        created = parse_body(create_project(multipart_event, lambda_context, tab="led"))

        resp = delete_item(
            api_event("DELETE", f"/api/led/{created['id']}", path_params={"tab": "led", "id": created["id"]}),
            lambda_context,
        )

        assert resp["statusCode"] == HTTPStatus.OK
        assert parse_body(resp)["message"] == "Item deleted successfully!"
        assert project_tables[ProjectCollection.LED].scan()["Items"] == []

    def test_delete_missing(self, project_tables, api_event, lambda_context) -> None:
        resp = delete_item(
            api_event("DELETE", "/api/led/missing", path_params={"tab": "led", "id": "missing"}),
            lambda_context,
        )

        assert resp["statusCode"] == HTTPStatus.NOT_FOUND
        assert parse_body(resp)["error"] == "NOT_FOUND"

    def test_item_id_is_trimmed(self, project_tables, upload_dir, multipart_event, api_event, lambda_context) -> None:
        created = parse_body(create_project(multipart_event, lambda_context, tab="led"))

        resp = get_item(
            api_event("GET", "/api/led/x", path_params={"tab": "led", "id": f" {created['id']} "}),
            lambda_context,
        )

        assert resp["statusCode"] == HTTPStatus.OK
        assert parse_body(resp)["id"] == created["id"]


class TestInvalidTab:
    @pytest.mark.parametrize(
        "handler,method,with_id,with_body",
        [
            (list_items, "GET", False, False),
            (get_item, "GET", True, False),
            (create_item, "POST", False, True),
            (update_item, "PUT", True, True),
            (delete_item, "DELETE", True, False),
        ],
    )
    def test_invalid_tab_never_reaches_store(
        self, multipart_event, api_event, lambda_context, handler, method, with_id, with_body
    ) -> None:
        path_params = {"tab": "foo", "id": "abc"} if with_id else {"tab": "foo"}
        if with_body:
            event = multipart_event(method, "/api/foo", path_params=path_params, fields=PROJECT_FIELDS)
        else:
            event = api_event(method, "/api/foo", path_params=path_params)

        with patch("handlers.projects.handler.build_project_pipeline") as build, patch(
            "handlers.projects.handler.parse_form"
        ) as parse:
            resp = handler(event, lambda_context)

        body = parse_body(resp)
        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body["error"] == "INVALID_COLLECTION"
        assert body["message"] == "Invalid collection/tab"
        build.assert_not_called()
        parse.assert_not_called()

    def test_missing_tab(self, api_event, lambda_context) -> None:
        resp = list_items(api_event("GET", "/api/"), lambda_context)

        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST

    @pytest.mark.parametrize("tab", [" cesp ", "cesp\n", "CESP"])
    def test_tab_is_matched_exactly(self, project_tables, api_event, lambda_context, tab) -> None:
        resp = list_items(api_event("GET", f"/api/{tab}", path_params={"tab": tab}), lambda_context)

        body = parse_body(resp)
        assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
        assert body["error"] == "INVALID_COLLECTION"
