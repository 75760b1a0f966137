from django import forms

from .coords import PercentRect
from .models import Category


class UploadNewspaperForm(forms.Form):
    title = forms.CharField(label='Title', max_length=200)
    description = forms.CharField(label='Description', widget=forms.Textarea(attrs={'rows': 3}), required=False)
    date = forms.DateField(label='Date', widget=forms.DateInput(attrs={'type': 'date'}))
    pdf_file = forms.FileField(label='PDF File', help_text='Please upload a PDF file')

    def clean_pdf_file(self):
        pdf_file = self.cleaned_data['pdf_file']
        pdf_file.seek(0)
        if pdf_file.read(5) != b'%PDF-':
            raise forms.ValidationError('The uploaded file is not a PDF.')
        pdf_file.seek(0)
        return pdf_file


class MappedAreaForm(forms.Form):
    headline = forms.CharField(label='Headline', max_length=300, required=False)
    category = forms.ChoiceField(label='Category', choices=Category.choices, initial=Category.OTHER, required=False)
    image = forms.ImageField(label='Extracted Image (Optional)', required=False,
                             help_text='Upload cropped image of the article')
    confirm = forms.BooleanField(required=False)

    def clean_category(self):
        return self.cleaned_data.get('category') or Category.OTHER


class MappedAreaPayloadForm(forms.Form):
    pageNumber = forms.IntegerField(min_value=1)
    x = forms.FloatField(min_value=0, max_value=100)
    y = forms.FloatField(min_value=0, max_value=100)
    width = forms.FloatField(min_value=0, max_value=100)
    height = forms.FloatField(min_value=0, max_value=100)
    headline = forms.CharField(max_length=300, required=False)
    category = forms.ChoiceField(choices=Category.choices, required=False)
    imageData = forms.CharField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        if self.errors:
            return cleaned_data
        rect = PercentRect(cleaned_data['x'], cleaned_data['y'], cleaned_data['width'], cleaned_data['height'])
        if rect.is_empty:
            raise forms.ValidationError('The area must have a positive width and height.')
        if not rect.fits_page():
            raise forms.ValidationError('The area must lie within the page.')
        return cleaned_data
