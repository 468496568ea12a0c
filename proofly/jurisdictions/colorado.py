from proofly.jurisdictions.models import (
    AgencyInfo,
    Eligibility,
    FeeSchedule,
    FormTemplate,
    JurisdictionConfig,
    MailingAddress,
    RequiredDocument,
)

COLORADO = JurisdictionConfig(
    code="CO",
    name="Colorado",
    status="live",
    vital_records=AgencyInfo(
        agency_name="Colorado Department of Public Health and Environment",
        mailing_address=MailingAddress(
            name="Vital Records Section, CDPHE",
            street="4300 Cherry Creek Drive South",
            city="Denver",
            state="CO",
            zip="80246-1530",
        ),
        phone="303-692-2200",
        processing_time_days=10,
    ),
    fees=FeeSchedule(
        first_copy=2500,
        additional_copy=2000,
        service_fee=500,
        postage=600,
        check_memo="Vital Records",
    ),
    form=FormTemplate(
        pdf_filename="CO_birth_request.pdf",
        field_map={
            # Requestor
            "requestorFirstName": "Text6",
            "requestorMiddleName": "Text7",
            "requestorLastName": "Text8",
            "requestorEmail": "Text9",
            "mailingStreet": "Text10",
            "mailingApt": "Text11",
            "mailingCity": "Text12",
            "mailingState": "Text13",
            "mailingZip": "Text14",
            "physicalStreet": "Text17",
            "physicalCity": "Text19",
            "physicalState": "Text20",
            "physicalZip": "Text21",
            # Relationship checkboxes
            "relationshipSelf": "Self",
            "relationshipParent": "Parent",
            "relationshipGrandparent": "Grandparent",
            "relationshipStepparent": "Stepparent",
            "relationshipSibling": "Sibling",
            "relationshipSpouse": "Spouse",
            "relationshipChild": "Child",
            "relationshipStepchild": "Stepchild",
            "relationshipGuardian": "Legal guardian",
            # Reason checkboxes
            "reasonNewborn": "Newborn",
            "reasonPassport": "TravelPassport",
            "reasonRecords": "Records",
            "reasonSchool": "School",
            "reasonInsurance": "Insurance",
            "reasonOtherCheck": "undefined_2",
            "reasonOtherText": "Other_2",
            # Registrant
            "registrantFirstName": "First",
            "registrantMiddleName": "Middle",
            "registrantLastName": "Last",
            "dobMonth": "Month",
            "dobDay": "Day",
            "dobYear": "Year",
            "deceasedNo": "undefined_4",
            "placeOfBirthCity": "City",
            "placeOfBirthCounty": "County",
            "motherFirstName": "First_2",
            "motherMiddleName": "Middle_2",
            "motherMaidenLastName": "Last_2",
            "fatherFirstName": "First_3",
            "fatherMiddleName": "Middle_3",
            "fatherLastName": "Maiden Last Name name prior to first marriage",
            # Date, fees, shipping
            "todaysDate": "Todays Date",
            "feeCopies": "undefined_5",
            "feeTotal": "Text2",
            "shippingRegularMail": "Please check your shipping method",
        },
    ),
    required_docs=(
        RequiredDocument(
            id="photoId",
            label="Government-issued photo ID (front only)",
            description=(
                "Driver's license, passport, or state ID. "
                "Must be current and show your full name."
            ),
            required=True,
            accepted_types=("image/jpeg", "image/png", "image/webp", "application/pdf"),
            max_size_mb=10,
        ),
    ),
    eligibility=Eligibility(
        who_can_request=(
            "self",
            "parent",
            "grandparent",
            "stepparent",
            "sibling",
            "spouse",
            "child",
            "stepchild",
            "legal_guardian",
        ),
        relationship_proof_required=False,
        notarized_required=False,
    ),
)
