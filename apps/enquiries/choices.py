from django.db import models


class Status(models.TextChoices):
    # Flat set: the edit form may move an enquiry to any status
    LEAD = 'Lead', 'Lead'
    ENQUIRY = 'Enquiry', 'Enquiry'
    QUOTE = 'Quote', 'Quote'
    WON = 'Won', 'Won'
    LOSS = 'Loss', 'Loss'


class Segment(models.TextChoices):
    AGRI = 'Agri', 'Agri'
    CORPORATE = 'Corporate', 'Corporate'
    OTHERS = 'Others', 'Others'


ACTIVE_STATUSES = (Status.LEAD, Status.ENQUIRY, Status.QUOTE)

# Bootstrap badge class per status (list and detail pages)
STATUS_BADGES = {
    Status.LEAD: 'bg-secondary',
    Status.ENQUIRY: 'bg-primary',
    Status.QUOTE: 'bg-warning text-dark',
    Status.WON: 'bg-success',
    Status.LOSS: 'bg-danger',
}
