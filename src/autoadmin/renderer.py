"""Jinja2 page renderer for the admin panel.

Templates are kept in memory and looked up by name: ``root``, ``app``,
``model``, ``instance`` and ``form``. Autoescape is on; pre-rendered form
markup and nav-bar items are marked safe explicitly.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

from autoadmin.adminpanel.integrators import TemplateRenderer

_BASE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{% block title %}{{ admin.config.name }}{% endblock %}</title>
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css">
</head>
<body>
<nav class="navbar navbar-expand bg-body-tertiary mb-3">
<div class="container-fluid">
<a class="navbar-brand" href="{{ admin.config.get_prefix() or '/' }}">{{ admin.config.name }}</a>
<div class="navbar-nav">
{% for a in apps %}<a class="nav-link" href="{{ a.get_full_link() }}">{{ a.display_name }}</a>
{% endfor %}
</div>
<div class="navbar-nav ms-auto">
{% for item in nav_bar_items %}{{ item.html()|safe }}
{% endfor %}
</div>
</div>
</nav>
<main class="container">
{% block content %}{% endblock %}
</main>
</body>
</html>
"""

_ROOT = """{% extends "base" %}
{% block content %}
<h1>{{ admin.config.name }}</h1>
<ul class="list-group">
{% for a in apps %}<li class="list-group-item"><a href="{{ a.get_full_link() }}">{{ a.display_name }}</a></li>
{% else %}<li class="list-group-item">No apps available.</li>
{% endfor %}
</ul>
{% endblock %}
"""

_APP = """{% extends "base" %}
{% block title %}{{ app.display_name }} | {{ admin.config.name }}{% endblock %}
{% block content %}
<h1>{{ app.display_name }}</h1>
<ul class="list-group">
{% for m in models %}<li class="list-group-item"><a href="{{ m.get_full_link() }}">{{ m.display_name }}</a></li>
{% else %}<li class="list-group-item">No models available.</li>
{% endfor %}
</ul>
{% endblock %}
"""

_MODEL = """{% extends "base" %}
{% block title %}{{ model.display_name }} | {{ admin.config.name }}{% endblock %}
{% block content %}
<div class="d-flex justify-content-between align-items-center mb-3">
<h1>{{ model.display_name }}</h1>
<a class="btn btn-primary" href="{{ model.get_full_add_link() }}">Add {{ model.display_name }}</a>
</div>
<form class="mb-3" method="get" action="{{ model.get_full_link() }}">
<input class="form-control" type="search" name="search" value="{{ search }}" placeholder="Search">
<input type="hidden" name="perPage" value="{{ per_page }}">
</form>
<table class="table table-striped" id="instances">
<thead><tr><th></th>
{% for f in model.list_display_fields %}<th>{{ f.display_name }}</th>{% endfor %}
<th></th></tr></thead>
<tbody>
{% for i in instances %}<tr>
<td>{% if i.permissions.delete %}<input type="checkbox" class="form-check-input select-row" value="{{ i.instance_id }}">{% endif %}</td>
{% for f in model.list_display_fields %}<td>{{ i.get_field_value(f.name) if i.get_field_value(f.name) is not none else "" }}</td>{% endfor %}
<td><a href="{{ i.get_link() }}">View</a>{% if i.permissions.update %} <a href="{{ i.get_edit_link() }}">Edit</a>{% endif %}</td>
</tr>
{% else %}<tr><td colspan="{{ model.list_display_fields|length + 2 }}">No records.</td></tr>
{% endfor %}
</tbody>
</table>
<p>{{ total_count }} total, page {{ current_page }} of {{ total_pages }}</p>
<nav><ul class="pagination">
{% if current_page > 1 %}<li class="page-item"><a class="page-link" href="?page={{ current_page - 1 }}&perPage={{ per_page }}&search={{ search|urlencode }}">Previous</a></li>{% endif %}
{% if current_page < total_pages %}<li class="page-item"><a class="page-link" href="?page={{ current_page + 1 }}&perPage={{ per_page }}&search={{ search|urlencode }}">Next</a></li>{% endif %}
</ul></nav>
<button class="btn btn-danger" id="bulk-delete">Delete selected</button>
<script>
document.getElementById("bulk-delete").addEventListener("click", function () {
  var ids = Array.from(document.querySelectorAll(".select-row:checked")).map(function (c) { return c.value; });
  if (!ids.length) { return; }
  fetch("{{ model.get_full_link() }}/bulk-delete", {
    method: "POST",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify({ids: ids})
  }).then(function () { window.location.reload(); });
});
</script>
{% endblock %}
"""

_INSTANCE = """{% extends "base" %}
{% block title %}{{ model.display_name }} {{ instance_id }} | {{ admin.config.name }}{% endblock %}
{% block content %}
<h1>{{ model.display_name }} {{ instance_id }}</h1>
<dl class="row">
{% for f in fields %}<dt class="col-sm-3">{{ f.display_name }}</dt><dd class="col-sm-9">{{ instance[f.name] if instance[f.name] is not none else "" }}</dd>
{% endfor %}
</dl>
{% if can_update %}<a class="btn btn-primary" href="{{ model.get_full_edit_link(instance_id) }}">Edit</a>{% endif %}
{% if can_delete %}<button class="btn btn-danger" id="delete-instance">Delete</button>
<script>
document.getElementById("delete-instance").addEventListener("click", function () {
  fetch("{{ model.get_full_instance_link(instance_id) }}", {method: "DELETE"})
    .then(function () { window.location = "{{ model.get_full_link() }}"; });
});
</script>{% endif %}
{% endblock %}
"""

_FORM = """{% extends "base" %}
{% block title %}{{ "Edit" if is_edit else "Add" }} {{ model.display_name }} | {{ admin.config.name }}{% endblock %}
{% block content %}
<h1>{{ "Edit" if is_edit else "Add" }} {{ model.display_name }}</h1>
<form method="post" action="{{ action }}">
{{ form_html|safe }}
<button class="btn btn-primary" type="submit">Save</button>
</form>
{% endblock %}
"""

DEFAULT_TEMPLATES: Dict[str, str] = {
    "base": _BASE,
    "root": _ROOT,
    "app": _APP,
    "model": _MODEL,
    "instance": _INSTANCE,
    "form": _FORM,
}


class Jinja2Renderer(TemplateRenderer):
    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        merged = dict(DEFAULT_TEMPLATES)
        if templates:
            merged.update(templates)
        self.env = Environment(
            loader=DictLoader(merged),
            undefined=StrictUndefined,
            autoescape=select_autoescape(default_for_string=True, default=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_template(self, name: str, context: Mapping[str, Any]) -> str:
        return self.env.get_template(name).render(**context)
