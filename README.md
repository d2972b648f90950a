# tasktracker

A small JSON HTTP API for keeping track of tasks. Tasks have a name, a
description, a status and the id of the user they belong to. The service
stores them in a database and exposes endpoints to create, list, update
and delete them.

## Running the server

The server reads its settings from the environment. On start-up it loads a
`.env` file from the current directory and refuses to start if there is none.

| Variable            | Meaning                                                  |
|---------------------|----------------------------------------------------------|
| `CONNECTION_STRING` | Database connection string. Required.                    |
| `PORT`              | Port to listen on.                                       |
| `IP`                | Address reported at start-up.                            |
| `JWT_SECRET`        | HMAC secret used to verify `access_token` cookies.       |
| `ENVIRONMENT`       | Set to `prod` to mark cookies as secure.                 |

A minimal `.env`:

```
CONNECTION_STRING=tasks.db
PORT=8080
JWT_SECRET=secret
```

Start the server with:

```
tasktracker
```

## Endpoints

| Method   | Path                   | Description                                        |
|----------|------------------------|----------------------------------------------------|
| `GET`    | `/`                    | Greeting message.                                  |
| `GET`    | `/health`              | Health check.                                      |
| `POST`   | `/api/task/`           | Create a task.                                     |
| `GET`    | `/api/task/all-task`   | List every task.                                   |
| `GET`    | `/api/task/id/<id>`    | Fetch one task by its id.                          |
| `GET`    | `/api/task/user`       | List a user's tasks, by `?uid=<id>` or `?email=`.  |
| `DELETE` | `/api/task/<id>`       | Delete a task.                                     |

### Creating a task

```
POST /api/task/
Content-Type: application/json

{"name": "Write report", "description": "Quarterly numbers", "user_id": "<user id>"}
```

`name` is required. If `status` is left out, the task starts as `TO_DO`.
The response (`201 Created`) holds the new task's `id`, `name`,
`description`, `status`, `created_at` and `updated_at`.

### Listing a user's tasks

```
GET /api/task/user?email=someone@example.com
```

Either `uid` or `email` must be given; `uid` wins when both are present.
Without either the server answers `400 Bad Request`.

### Errors

Every error response is a JSON object with a single `error` field, for
example `{"error": "name field for task is required"}`.

## Using it as a library

The pieces can be wired together directly. `tasktracker.db.new_database()`
opens the database named by `CONNECTION_STRING`; `TaskRepository` and
`UserRepository` in `tasktracker.repository` work on that connection;
`tasktracker.service.TaskService` holds the task rules; and
`tasktracker.server.create_app(task_handler)` builds the Flask application
around a `tasktracker.handlers.TaskHandler`.

Passwords are hashed with `tasktracker.passwords.hash_password` and checked
with `tasktracker.passwords.check_password`. Views can be protected with the
`tasktracker.auth.jwt_auth` decorator, which reads the `access_token` cookie
and makes the user id available through `tasktracker.auth.current_user_id()`.