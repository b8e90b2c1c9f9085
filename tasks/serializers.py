def serialize_task(task):
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "priority": task.priority,
        "room_id": task.room_id,
        "assigned_to": task.assigned_to,
        "due_date": task.due_date,
        "completed_at": task.completed_at,
    }
