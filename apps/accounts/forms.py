from django import forms
from django.utils.translation import gettext_lazy as _
from crispy_forms.helper import FormHelper
from crispy_forms.layout import HTML, Field, Layout, Submit
from crispy_forms.bootstrap import FormActions


# LOGIN FORM
class LoginForm(forms.Form):
    """
    Email + password sign-in against the configured backend

    Pass disabled=True in demo mode: every field renders read-only and the
    submit button is replaced by a notice.
    """

    email = forms.EmailField(
        label=_('Email'),
        required=True,
        error_messages={'required': _('Email is required')},
        widget=forms.EmailInput(attrs={
            'class': 'form-control',
            'placeholder': _('staff@example.com'),
            'autocomplete': 'username',
            'autofocus': True,
        })
    )

    password = forms.CharField(
        label=_('Password'),
        required=True,
        strip=False,
        error_messages={'required': _('Password is required')},
        widget=forms.PasswordInput(attrs={
            'class': 'form-control',
            'autocomplete': 'current-password',
        })
    )

    remember = forms.BooleanField(
        label=_('Keep me signed in for 30 days'),
        required=False,
        widget=forms.CheckboxInput(attrs={'class': 'form-check-input'})
    )

    # Page to return to after sign-in; checked again by the view
    next = forms.CharField(required=False, widget=forms.HiddenInput)

    def __init__(self, *args, **kwargs):
        disabled = kwargs.pop('disabled', False)
        super().__init__(*args, **kwargs)

        for field in self.fields.values():
            field.disabled = disabled

        if disabled:
            actions = HTML(
                '<button type="button" class="btn btn-secondary w-100" disabled>{}</button>'.format(_('Sign in'))
            )
        else:
            actions = Submit('submit', _('Sign in'), css_class='btn btn-primary w-100')

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            Field('email', css_class='mb-3'),
            Field('password', css_class='mb-3'),
            Field('remember'),
            'next',
            FormActions(actions, css_class='mt-3'),
        )

    def clean_email(self):
        return self.cleaned_data['email'].lower()
