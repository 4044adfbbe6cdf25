"""WebReg UI selectors.

WebReg markup may change between terms. Keep all selectors and text hooks
here so the rest of the application only deals with semantic queries.
"""

# SSO login
SSO_USERNAME = 'input[name="urn:mace:ucsd.edu:sso:username"]'
SSO_PASSWORD = 'input[name="urn:mace:ucsd.edu:sso:password"]'
LOGIN_ERROR = "#_login_error_message"

# Start page
START_GO_BUTTON = "#startpage-button-go"
ADVANCED_SEARCH = "#advanced-search"

# Advanced search
SEARCH_RESET = "#search-div-t-reset"
SEARCH_SECTION_ID = "#search-div-t-t3-i4"
LOADING_SPINNER = ".wr-spinner-loading"
RESULT_HEADER = "#search-group-header-id"
RESULT_LABEL_CELL = "td"


def enroll_button(section: str) -> str:
    # Matched on the whole id attribute. Section IDs are opaque and may contain
    # characters that mean something in a CSS `#id` selector.
    escaped = section.replace("\\", "\\\\").replace('"', '\\"')
    return f'[id="search-enroll-id-{escaped}"]'


# Dialogs. jQuery UI keeps every dialog in the DOM and toggles `display`
# in the inline style, so presence alone does not mean visible.
DIALOG = (
    "div[class='ui-dialog ui-widget ui-widget-content ui-corner-all ui-front "
    "ui-dialog-buttons ui-draggable ui-resizable']"
)
DIALOG_VISIBLE_STYLE = "display: block;"
DIALOG_BUTTON_TEXT = ".ui-button-text"
DIALOG_MSG_CLOSE = "#dialog-msg-close"
DIALOG_AFTER_ACTION = "#dialog-after-action"
DIALOG_AFTER_ACTION_CLOSE = "#dialog-after-action-close"
DIALOG_AFTER_ACTION_EMAIL = "#dialog-after-action-email"
DIALOG_CLOSE_BUTTONS = (DIALOG_MSG_CLOSE, DIALOG_AFTER_ACTION_CLOSE)

CONFIRM_LABEL = "Confirm"
