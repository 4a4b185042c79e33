# --- Split conversation states ---
ASKING_SPLIT_TITLE = 0
ASKING_SPLIT_NAMES = 1
ASKING_SPLIT_AMOUNTS = 2
ASKING_SPLIT_RECEIPT = 3
ASKING_SPLIT_CONFIRMATION = 4

PENDING_SPLIT_KEY = "pending_split"

from .handle_split_start import handle_split_start, handle_split_cancel  # noqa: E402
from .handle_split_title import handle_split_title  # noqa: E402
from .handle_split_names import handle_split_names  # noqa: E402
from .handle_split_amounts import handle_split_amounts  # noqa: E402
from .handle_split_receipt import handle_split_receipt  # noqa: E402
from .handle_split_confirmation import handle_split_confirmation  # noqa: E402

ALL_HANDLERS = {
    handle_split_start,
    handle_split_cancel,
    handle_split_title,
    handle_split_names,
    handle_split_amounts,
    handle_split_receipt,
    handle_split_confirmation,
}
