from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from typing import Any, Dict, List

from portfolio.core.context import AppContext
from portfolio.core.dependencies import get_context, get_notifier, require_admin_session
from portfolio.core.notifications import Notifier
from portfolio.modules.resources.controller import ResourceCrudController
from portfolio.modules.resources.form_dialog import FormDialog
from portfolio.modules.resources.list_view import ListView
from portfolio.modules.auth.session_gate import SessionGate
from portfolio.modules.resources.schema import ResourceSchema


def list_payload(view: ListView, notifier: Notifier) -> Dict[str, Any]:
    return {
        "resource": view.schema.name,
        "state": view.state.value,
        "records": view.records,
        "notifications": notifier.items,
    }


def saved_payload(dialog: FormDialog, view: ListView, notifier: Notifier) -> Dict[str, Any]:
    return {**list_payload(view, notifier), "record": dialog.result}


def raise_dialog_error(dialog: FormDialog) -> None:
    if dialog.error is not None:
        raise dialog.error
    raise HTTPException(status_code=409, detail="Form is not accepting submissions")


async def read_upload(file: UploadFile) -> bytes:
    try:
        return await file.read()
    finally:
        await file.close()


def build_resource_router(schema: ResourceSchema) -> APIRouter:
    """CRUD routes for a list-style resource (projects, certificates, experiences)."""
    router = APIRouter(prefix=f"/admin/{schema.name}", tags=[schema.name])
    create_model = schema.create_model
    update_model = schema.update_model

    def get_controller(
        confirm: bool = False,
        gate: SessionGate = Depends(require_admin_session),
        context: AppContext = Depends(get_context),
        notifier: Notifier = Depends(get_notifier),
    ) -> ResourceCrudController:
        return context.controller(schema.name, notifier, gate.token, confirm=lambda prompt: confirm)

    @router.get("")
    async def list_records(
        controller: ResourceCrudController = Depends(get_controller),
        notifier: Notifier = Depends(get_notifier),
    ):
        return list_payload(controller.load(), notifier)

    @router.get("/{record_id}")
    async def get_record(
        record_id: str,
        controller: ResourceCrudController = Depends(get_controller),
    ):
        dialog = controller.open_edit(record_id)
        return {"record": dialog.existing, "draft": dialog.draft, "mode": dialog.mode.value}

    @router.post("", status_code=201)
    async def create_record(
        data: create_model,
        controller: ResourceCrudController = Depends(get_controller),
        notifier: Notifier = Depends(get_notifier),
    ):
        dialog = controller.open_create()
        dialog.update_fields(data.model_dump())
        if dialog.submit() is None:
            raise_dialog_error(dialog)
        return saved_payload(dialog, controller.list_view, notifier)

    @router.put("/{record_id}")
    async def update_record(
        record_id: str,
        data: update_model,
        controller: ResourceCrudController = Depends(get_controller),
        notifier: Notifier = Depends(get_notifier),
    ):
        controller.load()
        dialog = controller.open_edit(record_id)
        dialog.update_fields(data.model_dump(exclude_unset=True))
        if dialog.submit() is None:
            raise_dialog_error(dialog)
        return saved_payload(dialog, controller.list_view, notifier)

    if schema.image_field is not None:
        @router.post("/{record_id}/image")
        async def upload_image(
            record_id: str,
            file: UploadFile = File(...),
            controller: ResourceCrudController = Depends(get_controller),
            notifier: Notifier = Depends(get_notifier),
        ):
            """Replace the record image with an uploaded file stored inline as a data URI."""
            dialog = controller.open_edit(record_id)
            dialog.choose_file(file.filename or "", file.content_type, await read_upload(file))
            if dialog.submit() is None:
                raise_dialog_error(dialog)
            return saved_payload(dialog, controller.list_view, notifier)

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        controller: ResourceCrudController = Depends(get_controller),
        notifier: Notifier = Depends(get_notifier),
    ):
        """Delete after explicit confirmation (`confirm=true`)."""
        view = controller.load()
        if not controller.delete(record_id):
            if view.error is not None:
                raise view.error
            raise HTTPException(status_code=409, detail="Deletion must be confirmed with confirm=true")
        return list_payload(view, notifier)

    return router


def build_singleton_router(schema: ResourceSchema) -> APIRouter:
    """Editor routes for a single-row resource (profile)."""
    router = APIRouter(prefix=f"/admin/{schema.name}", tags=[schema.name])
    update_model = schema.update_model

    def get_controller(
        gate: SessionGate = Depends(require_admin_session),
        context: AppContext = Depends(get_context),
        notifier: Notifier = Depends(get_notifier),
    ) -> ResourceCrudController:
        return context.controller(schema.name, notifier, gate.token)

    def editor_payload(controller: ResourceCrudController, dialog: FormDialog, notifier: Notifier) -> Dict[str, Any]:
        return {
            "resource": schema.name,
            "record": controller.singleton,
            "exists": controller.singleton is not None,
            "draft": dialog.draft,
            "mode": dialog.mode.value,
            "notifications": notifier.items,
        }

    @router.get("")
    async def get_singleton(
        controller: ResourceCrudController = Depends(get_controller),
        notifier: Notifier = Depends(get_notifier),
    ):
        dialog = controller.open_singleton()
        return editor_payload(controller, dialog, notifier)

    @router.put("")
    async def save_singleton(
        data: update_model,
        controller: ResourceCrudController = Depends(get_controller),
        notifier: Notifier = Depends(get_notifier),
    ):
        dialog = controller.open_singleton()
        dialog.update_fields(data.model_dump(exclude_unset=True))
        if dialog.submit() is None:
            raise_dialog_error(dialog)
        return {**editor_payload(controller, dialog, notifier), "saved": dialog.result}

    if schema.image_field is not None:
        @router.post("/image")
        async def upload_singleton_image(
            file: UploadFile = File(...),
            controller: ResourceCrudController = Depends(get_controller),
            notifier: Notifier = Depends(get_notifier),
        ):
            dialog = controller.open_singleton()
            dialog.choose_file(file.filename or "", file.content_type, await read_upload(file))
            if dialog.submit() is None:
                raise_dialog_error(dialog)
            return {**editor_payload(controller, dialog, notifier), "saved": dialog.result}

    return router


def build_admin_routers(resources: Dict[str, ResourceSchema]) -> List[APIRouter]:
    return [
        build_singleton_router(schema) if schema.singleton else build_resource_router(schema)
        for schema in resources.values()
    ]
