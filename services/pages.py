"""HTML pages returned by the tracking endpoint."""

import json
from html import escape

REDIRECT_DELAY_SECONDS = 2

_BASE_STYLE = """\
  * { margin:0; padding:0; box-sizing:border-box; }
  body { font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,'Helvetica Neue',Arial,sans-serif;
         background:linear-gradient(135deg,#667eea 0%,#764ba2 100%); min-height:100vh;
         display:flex; align-items:center; justify-content:center; padding:20px; }
  .container { background:#fff; border-radius:20px; box-shadow:0 20px 60px rgba(0,0,0,.3);
               padding:40px; max-width:500px; width:100%; text-align:center; }
  p { color:#718096; font-size:16px; line-height:1.6; margin:10px 0; }"""


def render_error_page(title: str, message: str, submessage: str) -> str:
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>{escape(title)} - Review Runner</title>
<style>
{_BASE_STYLE}
  .icon {{ width:80px; height:80px; margin:0 auto 20px; background:#ff6b6b; border-radius:50%;
           display:flex; align-items:center; justify-content:center; font-size:40px; }}
  h1 {{ color:#2d3748; font-size:28px; margin-bottom:15px; font-weight:700; }}
  .submessage {{ font-size:14px; color:#a0aec0; margin-top:20px; }}
</style>
</head>
<body>
<div class="container">
  <div class="icon">&#9888;&#65039;</div>
  <h1>{escape(title)}</h1>
  <p>{escape(message)}</p>
  <p class="submessage">{escape(submessage)}</p>
</div>
</body>
</html>"""


def render_redirect_page(
    business_name: str,
    redirect_url: str,
    customer_name: str,
    is_first_click: bool,
) -> str:
    """Landing page that forwards the browser to ``redirect_url``.

    Three redirect paths: a meta refresh, a scripted timeout as backup, and a
    manual link for browsers that block both.
    """
    name = escape(business_name or "")
    greeting = escape(customer_name or "there")
    href = escape(redirect_url, quote=True)
    # </ inside a script string would close the tag early
    url_json = json.dumps(redirect_url).replace("</", "<\\/")
    badge_color = "#10b981" if is_first_click else "#f59e0b"
    badge_text = "&#9989; First Click Tracked" if is_first_click else "&#128260; Repeat Visit"
    badge_class = "first-click" if is_first_click else "repeat-visit"

    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Redirecting to {name} Reviews</title>
<meta http-equiv="refresh" content="{REDIRECT_DELAY_SECONDS};url={href}">
<style>
{_BASE_STYLE}
  .logo {{ width:80px; height:80px; margin:0 auto 30px; background:linear-gradient(135deg,#667eea,#764ba2);
           border-radius:20px; display:flex; align-items:center; justify-content:center;
           font-size:40px; color:#fff; animation:pulse 2s infinite; }}
  @keyframes pulse {{ 0% {{ transform:scale(1); }} 50% {{ transform:scale(1.05); }} 100% {{ transform:scale(1); }} }}
  h1 {{ color:#2d3748; font-size:24px; margin-bottom:10px; font-weight:600; }}
  .greeting {{ color:#4a5568; font-size:18px; margin-bottom:20px; }}
  .business {{ font-size:20px; color:#667eea; font-weight:600; margin:15px 0; }}
  .spinner {{ width:50px; height:50px; border:3px solid #e2e8f0; border-top:3px solid #667eea;
              border-radius:50%; margin:20px auto; animation:spin 1s linear infinite; }}
  @keyframes spin {{ 0% {{ transform:rotate(0deg); }} 100% {{ transform:rotate(360deg); }} }}
  .manual-link {{ margin-top:30px; padding-top:20px; border-top:1px solid #e2e8f0; }}
  a {{ color:#667eea; text-decoration:none; font-weight:500; }}
  a:hover {{ color:#764ba2; text-decoration:underline; }}
  .footer {{ margin-top:30px; font-size:12px; color:#a0aec0; }}
  .tracking-badge {{ background:{badge_color}; color:#fff; padding:4px 8px; border-radius:4px;
                     font-size:11px; font-weight:600; display:inline-block; margin-bottom:20px; }}
</style>
</head>
<body>
<div class="container">
  <div class="tracking-badge {badge_class}">{badge_text}</div>
  <div class="logo">&#11088;</div>
  <p class="greeting">Hi {greeting}!</p>
  <h1>Taking you to</h1>
  <div class="business">{name}'s Review Page</div>
  <div class="spinner"></div>
  <p>You'll be redirected automatically in a moment...</p>
  <div class="manual-link">
    <p>Not redirecting?</p>
    <a href="{href}" rel="noopener noreferrer">Click here to continue &rarr;</a>
  </div>
  <div class="footer">
    <p>Your feedback helps {name} improve their service</p>
    <p style="margin-top:10px; opacity:.7;">Powered by Review Runner Tracking Server</p>
  </div>
</div>
<script>
const redirectUrl = {url_json};
setTimeout(() => {{ window.location.href = redirectUrl; }}, {REDIRECT_DELAY_SECONDS * 1000});
</script>
</body>
</html>"""
