from .send_split_summary import send_split_summary
