from __future__ import annotations

import math

from flask import Blueprint, request, jsonify, g

from models import storage
from models.task import Task
from models.schemas.task import TaskCreateSchema, TaskUpdateSchema, TaskQuerySchema, TaskOutSchema
from utils.decorators import auth_required
from utils.errors import NotFound

bp = Blueprint("tasks", __name__)

# Schemas
task_create_schema = TaskCreateSchema()
task_update_schema = TaskUpdateSchema()
task_query_schema = TaskQuerySchema()
task_out_schema = TaskOutSchema()
tasks_out_schema = TaskOutSchema(many=True)

MAX_LIMIT = 100


def _owned_task(task_id: str) -> Task:
    """Task by id for the caller; other users' tasks are indistinguishable from missing ones."""
    task = (
        storage.get_session()
        .query(Task)
        .filter(Task.id == task_id, Task.user_id == g.current_user.user_id)
        .first()
    )
    if task is None:
        raise NotFound("Task not found")
    return task


@bp.get("")
@auth_required()
def list_tasks():
    """
    List the caller's tasks with pagination, status filter and title search
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
      - in: query
        name: status
        type: string
        enum: [PENDING, IN_PROGRESS, COMPLETED]
      - in: query
        name: search
        type: string
        description: "Case-insensitive substring search on title"
    responses:
      200:
        description: Tasks and pagination info
      401:
        description: Unauthorized
    """
    params = task_query_schema.load(request.args.to_dict())
    page = params["page"]
    limit = min(params["limit"], MAX_LIMIT)

    query = storage.get_session().query(Task).filter(Task.user_id == g.current_user.user_id)
    if params["status"] is not None:
        query = query.filter(Task.status == params["status"])
    if params["search"]:
        query = query.filter(Task.title.icontains(params["search"].strip(), autoescape=True))

    total = query.count()
    rows = (
        query.order_by(Task.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return jsonify(
        {
            "success": True,
            "data": {
                "tasks": tasks_out_schema.dump(rows),
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": math.ceil(total / limit),
                },
            },
        }
    )


@bp.post("")
@auth_required()
def create_task():
    """
    Create a task
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title]
          properties:
            title: { type: string, maxLength: 200 }
            description: { type: string }
            status: { type: string, enum: [PENDING, IN_PROGRESS, COMPLETED] }
    responses:
      201:
        description: Created
      422:
        description: Validation error
    """
    data = task_create_schema.load(request.get_json(silent=True) or {})
    task = Task(
        title=data["title"],
        description=data.get("description"),
        status=data["status"],
        user_id=g.current_user.user_id,
    )
    storage.new(task)
    storage.save()
    return jsonify(
        {"success": True, "message": "Task created successfully", "data": task_out_schema.dump(task)}
    ), 201


@bp.get("/<task_id>")
@auth_required()
def get_task(task_id: str):
    """
    Get a single task by id
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - in: path
        name: task_id
        type: string
        required: true
    responses:
      200:
        description: Task found
      404:
        description: Not found
    """
    return jsonify({"success": True, "data": task_out_schema.dump(_owned_task(task_id))})


@bp.patch("/<task_id>")
@auth_required()
def update_task(task_id: str):
    """
    Update a task (partial)
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: task_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string, maxLength: 200 }
            description: { type: string }
            status: { type: string, enum: [PENDING, IN_PROGRESS, COMPLETED] }
    responses:
      200:
        description: Updated
      404:
        description: Not found
      422:
        description: Validation error
    """
    task = _owned_task(task_id)
    data = task_update_schema.load(request.get_json(silent=True) or {})

    for field in ["title", "description", "status"]:
        if field in data:
            setattr(task, field, data[field])

    storage.new(task)
    storage.save()
    return jsonify(
        {"success": True, "message": "Task updated successfully", "data": task_out_schema.dump(task)}
    )


@bp.delete("/<task_id>")
@auth_required()
def delete_task(task_id: str):
    """
    Delete a task
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - in: path
        name: task_id
        type: string
        required: true
    responses:
      200:
        description: Deleted
      404:
        description: Not found
    """
    task = _owned_task(task_id)
    storage.delete(task)
    storage.save()
    return jsonify({"success": True, "message": "Task deleted successfully"})


@bp.patch("/<task_id>/toggle")
@auth_required()
def toggle_task_status(task_id: str):
    """
    Advance the status: PENDING -> IN_PROGRESS -> COMPLETED -> PENDING
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - in: path
        name: task_id
        type: string
        required: true
    responses:
      200:
        description: Status toggled
      404:
        description: Not found
    """
    task = _owned_task(task_id)
    task.status = task.status.next()
    storage.new(task)
    storage.save()
    return jsonify(
        {"success": True, "message": "Task status toggled successfully", "data": task_out_schema.dump(task)}
    )
