
from django.conf import settings
from django.db import models

from .coords import PercentRect, clamp_percent
from .custom_storages import select_uploads_storage


class Category(models.TextChoices):
    POLITICS = 'politics', 'Politics'
    SPORTS = 'sports', 'Sports'
    BUSINESS = 'business', 'Business'
    ENTERTAINMENT = 'entertainment', 'Entertainment'
    LOCAL = 'local', 'Local'
    OTHER = 'other', 'Other'


class Newspaper(models.Model):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    date = models.DateField()
    pdf = models.FileField(storage=select_uploads_storage, upload_to='newspapers/')
    cover_image_url = models.TextField(blank=True)
    page_count = models.PositiveIntegerField(default=0)
    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)
    view_count = models.PositiveIntegerField(default=0)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='newspapers'
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date', '-uploaded_at']

    def __str__(self):
        return self.title

    def to_summary(self):
        """Gallery fields only; the PDF and the mapped areas can be large."""
        return {
            'id': self.pk,
            'title': self.title,
            'description': self.description,
            'date': self.date.isoformat(),
            'coverImageUrl': self.cover_image_url,
            'pageCount': self.page_count,
            'isPublished': self.is_published,
            'publishedAt': self.published_at.isoformat() if self.published_at else None,
            'viewCount': self.view_count,
        }

    def to_record(self):
        record = self.to_summary()
        record['pdfUrl'] = self.pdf.url if self.pdf else None
        record['mappedAreas'] = [area.to_record() for area in self.mapped_areas.all()]
        return record


class MappedAreaQuerySet(models.QuerySet):
    def for_newspaper(self, newspaper):
        return self.filter(newspaper=newspaper).order_by('pk')

    def create_for(self, newspaper, payload):
        coordinates = clamp_percent(PercentRect(
            float(payload['x']), float(payload['y']), float(payload['width']), float(payload['height'])
        ))
        return self.create(
            newspaper=newspaper,
            page_number=int(payload['pageNumber']),
            x=coordinates.x,
            y=coordinates.y,
            width=coordinates.width,
            height=coordinates.height,
            headline=payload.get('headline') or '',
            category=payload.get('category') or Category.OTHER,
            extracted_image_url=payload.get('imageData') or '',
        )


class MappedArea(models.Model):
    newspaper = models.ForeignKey(Newspaper, on_delete=models.CASCADE, related_name='mapped_areas')
    page_number = models.PositiveIntegerField()
    x = models.FloatField()
    y = models.FloatField()
    width = models.FloatField()
    height = models.FloatField()
    headline = models.CharField(max_length=300, blank=True)
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.OTHER)
    extracted_image_url = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = MappedAreaQuerySet.as_manager()

    class Meta:
        ordering = ['pk']

    def __str__(self):
        return f'{self.headline or "Untitled"} (page {self.page_number})'

    @property
    def percent_rect(self):
        return PercentRect(self.x, self.y, self.width, self.height)

    def to_record(self):
        return {
            'id': self.pk,
            'pageNumber': self.page_number,
            'coordinates': self.percent_rect.to_dict(),
            'headline': self.headline,
            'category': self.category,
            'extractedImageUrl': self.extracted_image_url or None,
        }
