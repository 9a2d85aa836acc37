import streamlit as st

from taskpulse.client import API, ApiError, TaskpulseClient
from taskpulse.webui import (
    DEBUG_OPERATIONS, PRIORITY_ICONS, PRIORITY_LABELS, STATUS_ICONS, STATUS_LABELS,
    format_date, format_uptime, queue_debug_run, recent_tasks, run_debug_operation, task_counts,
)

PAGES = {"dashboard": "Dashboard", "tasks": "Tasks", "form": "New Task", "debug": "Debug"}
STATUSES = list(STATUS_LABELS)
PRIORITIES = list(PRIORITY_LABELS)

st.set_page_config(page_title="Taskpulse", page_icon="✅", layout="wide")


@st.cache_resource(show_spinner=False)
def get_client() -> TaskpulseClient:
    return TaskpulseClient(API)


client = get_client()

for key, default in {
    "page": "dashboard",
    "editing_id": None,
    "pending_delete": None,
    "row_errors": {},
    "debug_log": [],
    "flash": None,
    "form_error": None,
    "debug_pending": None,
}.items():
    st.session_state.setdefault(key, default)


def go(page: str, editing_id=None):
    st.session_state.page = page
    st.session_state.editing_id = editing_id
    st.session_state.pending_delete = None


def on_nav_change():
    # picking "New Task" from the sidebar always starts a blank form
    st.session_state.editing_id = None
    st.session_state.pending_delete = None


def flash():
    msg = st.session_state.flash
    if msg:
        st.success(msg)
        st.session_state.flash = None


# ----------------------------
# Views
# ----------------------------
def dashboard_view():
    head, action = st.columns([4, 1])
    head.header("Dashboard")
    head.caption("Overview of tasks and system health")
    action.button("+ New Task", on_click=go, args=("form",), type="primary", use_container_width=True)

    try:
        with st.spinner("Loading..."):
            tasks, health = client.dashboard()
    except Exception as e:
        st.error(f"Dashboard load error: {e}")
        return

    counts = task_counts(tasks)
    cols = st.columns(5)
    for col, (label, key) in zip(cols, [("Total", "total"), ("To Do", "todo"), ("In Progress", "in_progress"),
                                        ("Done", "done"), ("Critical", "critical")]):
        col.metric(label, counts[key])

    left, right = st.columns([2, 1])
    with left:
        sub, link = st.columns([3, 1])
        sub.subheader("Recent Tasks")
        link.button("View all", on_click=go, args=("tasks",))
        recent = recent_tasks(tasks)
        if not recent:
            st.info("No tasks yet.")
        for t in recent:
            st.markdown(
                f"**{t['title']}** · {STATUS_ICONS[t['status']]} {STATUS_LABELS[t['status']]} · "
                f"{PRIORITY_ICONS[t['priority']]} {PRIORITY_LABELS[t['priority']]}"
            )

    with right:
        st.subheader("System Health")
        db = health.get("database", {})
        st.markdown(
            f"- **Status:** {'🟢' if health['status'] == 'healthy' else '🔴'} {health['status']}\n"
            f"- **Uptime:** {format_uptime(health['uptime_seconds'])}\n"
            f"- **Database:** {'Connected' if db.get('connected') else 'Disconnected'}\n"
            f"- **Environment:** {health['environment']}"
        )
        if db.get("error"):
            st.caption(db["error"])


def change_status(task_id: int):
    status = st.session_state[f"status_{task_id}"]
    try:
        client.update_task(task_id, status=status)
        st.session_state.row_errors.pop(task_id, None)
    except ApiError as e:
        st.session_state.row_errors[task_id] = e.message


def confirm_delete(task_id: int):
    try:
        client.delete_task(task_id)
        st.session_state.flash = "Task deleted"
        st.session_state.row_errors.pop(task_id, None)
    except ApiError as e:
        st.session_state.row_errors[task_id] = e.message
    st.session_state.pending_delete = None


def task_list_view():
    head, action = st.columns([4, 1])
    head.header("Tasks")
    action.button("+ New Task", on_click=go, args=("form",), type="primary", use_container_width=True)
    flash()

    f1, f2, f3 = st.columns([1, 1, 2])
    status = f1.selectbox("Status", [""] + STATUSES, format_func=lambda s: STATUS_LABELS.get(s, "All statuses"))
    priority = f2.selectbox("Priority", [""] + PRIORITIES,
                            format_func=lambda p: PRIORITY_LABELS.get(p, "All priorities"))
    search = f3.text_input("Search", placeholder="Search title or description")

    try:
        tasks = client.get_tasks(status=status, priority=priority, search=search.strip())
    except Exception as e:
        st.error(f"Failed to load tasks: {e}")
        return

    if not tasks:
        st.info("No tasks match the current filters.")
        return

    for t in tasks:
        tid = t["id"]
        with st.container(border=True):
            body, state, edit, delete = st.columns([5, 2, 1, 1])
            body.markdown(f"**{t['title']}**  {PRIORITY_ICONS[t['priority']]} {PRIORITY_LABELS[t['priority']]}")
            if t.get("description"):
                body.caption(t["description"])
            body.caption(f"Created {format_date(t['created_at'])}")

            st.session_state[f"status_{tid}"] = t["status"]
            state.selectbox("Status", STATUSES, key=f"status_{tid}", format_func=STATUS_LABELS.get,
                            label_visibility="collapsed", on_change=change_status, args=(tid,))
            edit.button("Edit", key=f"edit_{tid}", on_click=go, args=("form", tid))
            delete.button("Delete", key=f"delete_{tid}",
                          on_click=lambda i=tid: st.session_state.update(pending_delete=i))

            if st.session_state.pending_delete == tid:
                st.warning("Delete this task?")
                yes, no, _ = st.columns([1, 1, 6])
                yes.button("Confirm", key=f"confirm_{tid}", type="primary", on_click=confirm_delete, args=(tid,))
                no.button("Cancel", key=f"cancel_{tid}",
                          on_click=lambda: st.session_state.update(pending_delete=None))

            if tid in st.session_state.row_errors:
                st.error(st.session_state.row_errors[tid])


def submit_form(editing_id, suffix: str):
    fields = {name: st.session_state[f"form_{name}_{suffix}"] for name in ("title", "description", "status", "priority")}
    if not fields["title"].strip():
        st.session_state.form_error = "Title is required"
        return
    try:
        if editing_id:
            client.update_task(editing_id, **fields)
            st.session_state.flash = "Task updated"
        else:
            client.create_task(**fields)
            st.session_state.flash = "Task created"
    except ApiError as e:
        st.session_state.form_error = e.message
        return
    st.session_state.form_error = None
    go("tasks")


def task_form_view():
    editing_id = st.session_state.editing_id
    suffix = str(editing_id or "new")
    st.header("Edit Task" if editing_id else "New Task")

    task = {"title": "", "description": "", "status": "todo", "priority": "medium"}
    if editing_id:
        try:
            task = client.get_task(editing_id)
        except ApiError as e:
            st.error(f"Failed to load task: {e.message}")
            st.button("Back to tasks", on_click=go, args=("tasks",))
            return

    if st.session_state.form_error:
        st.error(st.session_state.form_error)
        st.session_state.form_error = None

    with st.form(f"task_form_{suffix}"):
        st.text_input("Title *", value=task["title"], max_chars=255, key=f"form_title_{suffix}")
        st.text_area("Description", value=task.get("description") or "", key=f"form_description_{suffix}")
        c1, c2 = st.columns(2)
        c1.selectbox("Status", STATUSES, index=STATUSES.index(task["status"]),
                     format_func=STATUS_LABELS.get, key=f"form_status_{suffix}")
        c2.selectbox("Priority", PRIORITIES, index=PRIORITIES.index(task["priority"]),
                     format_func=PRIORITY_LABELS.get, key=f"form_priority_{suffix}")
        save, cancel = st.columns([1, 5])
        save.form_submit_button("Update Task" if editing_id else "Create Task", type="primary",
                                on_click=submit_form, args=(editing_id, suffix))
        cancel.form_submit_button("Cancel", on_click=go, args=("tasks",))


def queue_debug(index: int):
    entry = queue_debug_run(st.session_state.debug_log, DEBUG_OPERATIONS[index])
    st.session_state.debug_pending = (index, entry)


def debug_view():
    head, action = st.columns([4, 1])
    head.header("Debug Panel")
    head.caption("Trigger slow, failing and heavy requests to exercise monitoring.")
    action.button("Clear results", on_click=lambda: st.session_state.update(debug_log=[]),
                  use_container_width=True)

    cols = st.columns(3)
    for i, op in enumerate(DEBUG_OPERATIONS):
        with cols[i % 3]:
            with st.container(border=True):
                st.markdown(f"**{op.label}**")
                st.caption(op.description)
                st.button("Run", key=f"debug_{i}", use_container_width=True,
                          on_click=queue_debug, args=(i,))

    st.subheader("Results")
    if not st.session_state.debug_log:
        st.info("No results yet. Run an operation above.")
    icons = {"running": "⏳", "success": "✅", "error": "❌"}
    for entry in st.session_state.debug_log:
        with st.container(border=True):
            duration = f" · {entry.duration_ms}ms" if entry.duration_ms is not None else ""
            st.markdown(f"{icons[entry.status]} **{entry.label}** · "
                        f"{entry.started_at.strftime('%H:%M:%S')}{duration}")
            if entry.error:
                st.error(entry.error)
            elif entry.preview:
                st.code(entry.preview, language="json")

    # the log above already shows the queued entry as running
    pending = st.session_state.debug_pending
    if pending:
        st.session_state.debug_pending = None
        index, entry = pending
        with st.spinner(f"{entry.label} running..."):
            run_debug_operation(client, DEBUG_OPERATIONS[index], entry)
        st.rerun()


# ----------------------------
# Shell
# ----------------------------
with st.sidebar:
    st.title("Taskpulse")
    st.radio("Navigate", list(PAGES), key="page", format_func=PAGES.get, on_change=on_nav_change)
    st.caption(f"API: {API}")

{"dashboard": dashboard_view, "tasks": task_list_view, "form": task_form_view, "debug": debug_view}[
    st.session_state.page
]()
