from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .choices import Segment, Status
from .pipeline import staff_choices


# ENQUIRY FORM
class EnquiryForm(forms.Form):
    """
    Create/edit form for an enquiry

    Only presence of required fields is checked; phone format and date order
    are left to the staff entering the data.
    """

    date = forms.DateField(
        label=_('Date'),
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
        error_messages={'required': _('Date is required')},
    )

    segment = forms.ChoiceField(
        label=_('Segment'),
        choices=Segment.choices,
        widget=forms.Select(attrs={'class': 'form-select'}),
        error_messages={'required': _('Segment is required')},
    )

    customer_name = forms.CharField(
        label=_('Customer Name'),
        max_length=200,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'list': 'customer-names',
            'autocomplete': 'off',
            'placeholder': _('Start typing to search customers'),
        }),
        error_messages={'required': _('Customer name is required')},
    )

    phone = forms.CharField(
        label=_('Phone'),
        max_length=20,
        widget=forms.TextInput(attrs={'class': 'form-control', 'dir': 'ltr'}),
        error_messages={'required': _('Phone number is required')},
    )

    location = forms.CharField(
        label=_('Location'),
        max_length=200,
        widget=forms.TextInput(attrs={'class': 'form-control'}),
        error_messages={'required': _('Location is required')},
    )

    status = forms.ChoiceField(
        label=_('Status'),
        choices=Status.choices,
        widget=forms.Select(attrs={'class': 'form-select'}),
        error_messages={'required': _('Status is required')},
    )

    assigned_to = forms.ChoiceField(
        label=_('Assigned To'),
        choices=(),
        widget=forms.Select(attrs={'class': 'form-select'}),
        error_messages={'required': _('Please select a staff member')},
    )

    reminder_date = forms.DateField(
        label=_('Reminder Date'),
        required=False,
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
    )

    requirement_details = forms.CharField(
        label=_('Requirement Details'),
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 4}),
        error_messages={'required': _('Requirement details are required')},
    )

    remarks = forms.CharField(
        label=_('Remarks'),
        required=False,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
    )

    def __init__(self, *args, **kwargs):
        disabled = kwargs.pop('disabled', False)
        super().__init__(*args, **kwargs)

        # Staff list comes from settings, so it is read per form
        self.fields['assigned_to'].choices = [('', _('Select staff member'))] + staff_choices()

        self.fields['date'].initial = timezone.localdate()
        self.fields['segment'].initial = Segment.AGRI
        self.fields['status'].initial = Status.LEAD

        if disabled:
            for field in self.fields.values():
                field.disabled = True


# FILTER FORM
class EnquiryFilterForm(forms.Form):
    search = forms.CharField(
        required=False,
        label=_('Search'),
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': _('Search by customer, phone, location or requirement...'),
        })
    )

    status = forms.ChoiceField(
        choices=[('', _('All Statuses'))] + list(Status.choices),
        required=False,
        label=_('Status'),
        widget=forms.Select(attrs={'class': 'form-select'})
    )
