"""
Helpers for the selected staff member

The staff name picked on the dashboard is kept in the visitor's session. It is
the default assignee for new enquiries and the filter on the enquiry list.
"""
from apps.enquiries.pipeline import is_staff_name

SELECTED_STAFF_KEY = 'selected_staff'


def get_selected_staff(request):
    """
    Get the staff name selected in this browser session

    Returns:
        Staff name or None (names no longer configured are dropped)
    """
    name = request.session.get(SELECTED_STAFF_KEY)
    if name and not is_staff_name(name):
        # Staff list changed - clear session
        request.session.pop(SELECTED_STAFF_KEY, None)
        return None
    return name or None


def set_selected_staff(request, name):
    """
    Remember the selected staff name

    Returns:
        True if the name is a configured staff member, False otherwise
    """
    if not is_staff_name(name):
        return False
    request.session[SELECTED_STAFF_KEY] = name
    return True


def clear_selected_staff(request):
    """Clear selected staff from session"""
    request.session.pop(SELECTED_STAFF_KEY, None)
