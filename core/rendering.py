# core/rendering.py
from typing import Optional
from jinja2 import DictLoader, Environment, select_autoescape
from model.record import Record

INDEX_HTML = r"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>nogo</title>
  <link rel="stylesheet" href="/css/nogo.css" />
</head>
<body>
  <header>
    <h1><a href="/">nogo</a></h1>
    <span class="count">{{ total_count }} keys</span>
  </header>

  <section class="forms">
    <form method="get" action="/" class="search">
      <input type="search" name="q" value="{{ q or '' }}" placeholder="search keys (3+ chars)" minlength="3" />
      <button type="submit">Search</button>
      <a href="/?p=1" class="{% if p == '1' %}active{% endif %}">Paused</a>
    </form>

    <form method="post" action="/" class="create">
      <input type="text" name="key" placeholder="new key (4+ chars)" minlength="4" required />
      <label><input type="checkbox" name="paused" value="1" /> paused</label>
      <button type="submit">Save</button>
    </form>
  </section>

  {% if data is not none %}
  <table class="records">
    <thead><tr><th>Key</th><th>Paused</th><th>Data</th></tr></thead>
    <tbody>
    {% for key, rec in data | dictsort %}
      <tr class="{% if rec.paused %}paused{% endif %}">
        <td><a href="/{{ key | urlencode }}">{{ key }}</a></td>
        <td>{{ "yes" if rec.paused else "no" }}</td>
        <td>{% if rec.data is not none %}<code>{{ rec.data | tojson }}</code>{% endif %}</td>
      </tr>
    {% else %}
      <tr><td colspan="3" class="empty">No records</td></tr>
    {% endfor %}
    </tbody>
  </table>
  {% endif %}
</body>
</html>
"""

NOGO_CSS = """\
body { margin: 0 auto; max-width: 960px; padding: 24px; font-family: system-ui, -apple-system, "Segoe UI", sans-serif; color: #1d2330; background: #f7f8fa; }
a { color: #2563eb; text-decoration: none; }
header { display: flex; align-items: baseline; justify-content: space-between; margin-bottom: 16px; }
header h1 { margin: 0; font-size: 24px; }
.count { color: #6b7280; }
.forms { display: flex; flex-wrap: wrap; gap: 16px; margin-bottom: 20px; }
.forms form { display: flex; align-items: center; gap: 8px; }
input[type=search], input[type=text] { padding: 6px 8px; border: 1px solid #d1d5db; border-radius: 6px; }
button { padding: 6px 12px; border: 0; border-radius: 6px; background: #2563eb; color: #fff; cursor: pointer; }
a.active { font-weight: bold; }
table.records { width: 100%; border-collapse: collapse; background: #fff; }
table.records th, table.records td { padding: 8px 10px; border-bottom: 1px solid #e5e7eb; text-align: left; }
tr.paused td { color: #b45309; }
td.empty { color: #6b7280; text-align: center; }
code { font-size: 12px; word-break: break-all; }
"""

_env = Environment(
    loader=DictLoader({"index.html": INDEX_HTML}),
    autoescape=select_autoescape(["html"]),
)


def render_index(
    data: Optional[dict[str, Record]],
    total_count: int,
    q: Optional[str] = None,
    p: Optional[str] = None,
) -> str:
    return _env.get_template("index.html").render(
        data=data, total_count=total_count, q=q, p=p
    )
